# profile_configurator/config.py
from __future__ import annotations
import os, re
from dataclasses import dataclass
from typing import Any, Dict
import yaml
from .utils import ESCAPE_MODES

ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)?(?::([^}]*))?\}")

DEFAULT_MSG_VPN_REF = "solacebroker_msg_vpn.NEMS_01.msg_vpn_name"
DEFAULT_PUBLISHER_CLIENT_PROFILE_REF = (
    "solacebroker_msg_vpn_client_profile.NEMS_01_publisher-client-profile.client_profile_name"
)
DEFAULT_SUBSCRIBER_CLIENT_PROFILE_REF = (
    "solacebroker_msg_vpn_client_profile.NEMS_01_subscriber-client-profile.client_profile_name"
)

def _interpolate_env(val: Any) -> Any:
    """Replace ${VAR[:default]} in strings recursively; other types pass through."""
    if isinstance(val, str):
        def repl(m: re.Match) -> str:
            var = m.group(1) or ""
            default = m.group(2) or ""
            return os.getenv(var, default)
        return ENV_PATTERN.sub(repl, val)
    if isinstance(val, list):
        return [_interpolate_env(x) for x in val]
    if isinstance(val, dict):
        return {k: _interpolate_env(v) for k, v in val.items()}
    return val

def _as_bool(x: Any, default: bool = False) -> bool:
    if isinstance(x, bool): return x
    if x is None: return default
    s = str(x).strip().lower()
    return s in ("1", "true", "yes", "on")

@dataclass(frozen=True)
class HTTPConf:
    bind: str
    port: int
    waitress_threads: int

@dataclass(frozen=True)
class KeycloakConf:
    create_client_endpoint_url: str | None
    http_timeout: int
    user_agent: str
    log_requests: bool

@dataclass(frozen=True)
class GeneratorConf:
    msg_vpn_ref: str
    publisher_client_profile_ref: str
    subscriber_client_profile_ref: str
    topic_escape: str
    max_msg_spool_usage: int
    max_instances: int

@dataclass(frozen=True)
class AppConfig:
    http: HTTPConf
    keycloak: KeycloakConf
    generator: GeneratorConf

def build_config(data: Dict[str, Any]) -> AppConfig:
    cfg = _interpolate_env(data or {})

    http = cfg.get("http", {}) or {}
    kc = cfg.get("keycloak", {}) or {}
    gen = cfg.get("generator", {}) or {}

    http_conf = HTTPConf(
        bind=str(http.get("bind", "0.0.0.0")),
        port=int(http.get("port", 5000)),
        waitress_threads=int(http.get("waitress_threads", 8)),
    )
    kc_conf = KeycloakConf(
        # an empty env default means "not configured"
        create_client_endpoint_url=(kc.get("create_client_endpoint_url") or None),
        http_timeout=int(kc.get("http_timeout", 10)),
        user_agent=str(kc.get("user_agent", "profile-configurator")),
        log_requests=_as_bool(kc.get("log_requests"), False),
    )
    gen_conf = GeneratorConf(
        msg_vpn_ref=str(gen.get("msg_vpn_ref", DEFAULT_MSG_VPN_REF)),
        publisher_client_profile_ref=str(
            gen.get("publisher_client_profile_ref", DEFAULT_PUBLISHER_CLIENT_PROFILE_REF)),
        subscriber_client_profile_ref=str(
            gen.get("subscriber_client_profile_ref", DEFAULT_SUBSCRIBER_CLIENT_PROFILE_REF)),
        topic_escape=str(gen.get("topic_escape", "gt")).strip().lower(),
        max_msg_spool_usage=int(gen.get("max_msg_spool_usage", 500)),
        max_instances=max(int(gen.get("max_instances", 100)), 1),
    )
    if gen_conf.topic_escape not in ESCAPE_MODES:
        raise RuntimeError(f"generator.topic_escape must be one of {', '.join(ESCAPE_MODES)}")
    return AppConfig(http=http_conf, keycloak=kc_conf, generator=gen_conf)

def default_config() -> AppConfig:
    return build_config({
        "keycloak": {
            "create_client_endpoint_url": "${KEYCLOAK_CREATE_CLIENT_ENDPOINT_URL:}",
        },
    })

def load_config(path: str = "/app/config.yaml") -> AppConfig:
    if not os.path.isfile(path):
        # Fallback: .yml
        alt = os.path.splitext(path)[0] + ".yml"
        if os.path.isfile(alt):
            path = alt
        else:
            raise RuntimeError(f"config not found at {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except Exception as e:
        raise RuntimeError(f"error reading {path}: {e}")

    if not isinstance(data, dict):
        raise RuntimeError(f"error reading {path}: top level must be a mapping")
    return build_config(data)
