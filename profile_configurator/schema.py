# profile_configurator/schema.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Tuple

PUBLISHER = "publisher"
SUBSCRIBER = "subscriber"
APPLICATION_TYPES = (PUBLISHER, SUBSCRIBER)

class ValidationError(ValueError):
    """Input rejected before generation; ``errors`` maps wire field -> message."""

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))

@dataclass(frozen=True)
class ProfileConfiguratorValues:
    application_type: str
    auth_profile_name: str
    acl_profile_name: str
    topics: Tuple[str, ...]
    queue_name: str | None = None
    owner_id: str | None = None
    number_of_instances: int = 1

    @property
    def is_subscriber(self) -> bool:
        return self.application_type == SUBSCRIBER

def _opt_str(x: Any) -> str | None:
    # non-strings count as missing, never as their repr
    if not isinstance(x, str):
        return None
    return x.strip() or None

def _topics(raw: Any) -> Tuple[List[str], str | None]:
    if not isinstance(raw, (list, tuple)):
        return [], "At least one topic is required."
    out: List[str] = []
    for t in raw:
        # form payloads send [{"value": "..."}], files usually plain strings
        value = t.get("value") if isinstance(t, dict) else t
        if not isinstance(value, str) or not value.strip():
            return out, "Topic cannot be empty."
        out.append(value)
    if not out:
        return out, "At least one topic is required."
    return out, None

def parse_values(data: Mapping[str, Any], max_instances: int = 100,
                 require_owner: bool = True) -> ProfileConfiguratorValues:
    """Validate a camelCase form/JSON payload.

    ``require_owner=False`` lets subscribers through without an owner id, for
    callers that fetch owner ids from the identity provider.
    """
    if not isinstance(data, Mapping):
        raise ValidationError({"": "Expected an object."})

    errors: Dict[str, str] = {}

    app_type = data.get("applicationType")
    if app_type not in APPLICATION_TYPES:
        errors["applicationType"] = "Application type is required."

    auth_name = _opt_str(data.get("authProfileName"))
    if not auth_name:
        errors["authProfileName"] = "Auth Profile name is required."
    acl_name = _opt_str(data.get("aclProfileName"))
    if not acl_name:
        errors["aclProfileName"] = "ACL Profile name is required."

    topics, topic_err = _topics(data.get("topics"))
    if topic_err:
        errors["topics"] = topic_err

    n = data.get("numberOfInstances")
    if n is None or n == "":
        n = 1
    elif isinstance(n, bool) or not isinstance(n, (int, str)):
        errors["numberOfInstances"] = "Number of instances must be a whole number."
    else:
        try:
            n = int(n)
        except ValueError:
            errors["numberOfInstances"] = "Number of instances must be a whole number."
    if "numberOfInstances" not in errors:
        if n < 1:
            errors["numberOfInstances"] = "Number of instances must be at least 1."
        elif n > max_instances:
            errors["numberOfInstances"] = f"Number of instances must be at most {max_instances}."

    for key in ("queueName", "ownerId"):
        raw = data.get(key)
        if raw is not None and not isinstance(raw, str):
            errors[key] = "Must be text."
    queue_name = _opt_str(data.get("queueName"))
    owner_id = _opt_str(data.get("ownerId"))
    if app_type == SUBSCRIBER:
        if not queue_name and "queueName" not in errors:
            errors["queueName"] = "Queue Name is required for subscriber application type."
        if require_owner and not owner_id and "ownerId" not in errors:
            errors["ownerId"] = "Owner ID is required for subscriber application type."

    if errors:
        raise ValidationError(errors)

    return ProfileConfiguratorValues(
        application_type=app_type,
        auth_profile_name=auth_name,
        acl_profile_name=acl_name,
        topics=tuple(topics),
        queue_name=queue_name,
        owner_id=owner_id,
        number_of_instances=n,
    )

def values_to_wire(v: ProfileConfiguratorValues) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "applicationType": v.application_type,
        "authProfileName": v.auth_profile_name,
        "aclProfileName": v.acl_profile_name,
        "topics": [{"value": t} for t in v.topics],
        "numberOfInstances": v.number_of_instances,
    }
    if v.queue_name:
        out["queueName"] = v.queue_name
    if v.owner_id:
        out["ownerId"] = v.owner_id
    return out
