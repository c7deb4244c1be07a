# profile_configurator/owners.py
from __future__ import annotations
from typing import List, Optional
from .keycloak import ClientIdFetchError, KeycloakClient
from .schema import ProfileConfiguratorValues

def needs_owner_lookup(values: ProfileConfiguratorValues) -> bool:
    """True when resolve_owner_ids would call the identity provider."""
    if not values.is_subscriber:
        return False
    return values.number_of_instances > 1 or not values.owner_id

def resolve_owner_ids(values: ProfileConfiguratorValues,
                      client: KeycloakClient) -> Optional[List[Optional[str]]]:
    """Fetch queue owner ids for subscriber instances, one request at a time.

    Multi-instance: one id per instance, a failed fetch is logged and kept as
    ``None`` so the remaining instances still get generated.
    Single instance without ``owner_id``: one fetch, failures propagate.
    Anything else needs no lookup and returns ``None``.
    """
    if not needs_owner_lookup(values):
        return None

    n = values.number_of_instances
    if n > 1:
        out: List[Optional[str]] = []
        for i in range(1, n + 1):
            try:
                out.append(client.fetch_new_client_id())
            except ClientIdFetchError as e:
                print(f"[owners] instance {i}/{n}: {e}")
                out.append(None)
        ok = sum(1 for x in out if x is not None)
        print(f"[owners] fetched {ok}/{n} owner ids")
        return out

    return [client.fetch_new_client_id()]
