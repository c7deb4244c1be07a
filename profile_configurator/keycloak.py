# profile_configurator/keycloak.py
from __future__ import annotations
import requests
from typing import Any, Dict
from .config import KeycloakConf

class ClientIdFetchError(RuntimeError):
    """The identity provider did not hand out a new client id."""

def _headers(cfg: KeycloakConf) -> Dict[str, str]:
    return {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": cfg.user_agent,
    }

class KeycloakClient:
    def __init__(self, cfg: KeycloakConf, session: requests.Session | None = None) -> None:
        self.cfg = cfg
        self.session = session or requests.Session()

    def fetch_new_client_id(self) -> str:
        """POST to the client creation endpoint and return its ``clientId``."""
        url = self.cfg.create_client_endpoint_url
        if not url:
            print("[keycloak] create_client_endpoint_url is not configured "
                  "(set KEYCLOAK_CREATE_CLIENT_ENDPOINT_URL or keycloak.create_client_endpoint_url)")
            raise ClientIdFetchError("Keycloak endpoint not configured.")

        try:
            r = self.session.post(url, headers=_headers(self.cfg), json={}, timeout=self.cfg.http_timeout)
        except requests.RequestException as e:
            print(f"[keycloak] request to {url} failed: {e}")
            raise ClientIdFetchError("An unexpected error occurred while fetching the client ID.") from e

        if self.cfg.log_requests:
            print(f"[keycloak] POST {url} status={r.status_code} bytes={len(r.content or b'')}")
        if not r.ok:
            print(f"[keycloak] request failed with status {r.status_code}: {r.text}")
            raise ClientIdFetchError(f"Failed to fetch client ID from Keycloak. Status: {r.status_code}")

        try:
            data: Any = r.json()
        except ValueError as e:
            print(f"[keycloak] response is not JSON: {r.text[:200]}")
            raise ClientIdFetchError("Invalid response format from Keycloak endpoint.") from e

        client_id = data.get("clientId") if isinstance(data, dict) else None
        if not isinstance(client_id, str) or not client_id:
            print(f"[keycloak] response did not contain a valid clientId: {data!r}")
            raise ClientIdFetchError("Invalid response format from Keycloak endpoint.")
        return client_id

    def close(self) -> None:
        self.session.close()
