# profile_configurator/generator.py
"""Build solacebroker Terraform resources for ACL/auth profiles, topic
exceptions and (subscriber only) a queue with its topic subscriptions.

Every function here is pure: the same values give the same document.
Quoted values arrive already HCL-escaped (see ``utils.hcl_string``).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from .config import GeneratorConf, build_config
from .schema import PUBLISHER, ProfileConfiguratorValues
from .utils import hcl_string, hcl_topic, sanitize_resource_name

INSTANCE_SEPARATOR = "\n\n\n# --- Next Profile Instance ---\n\n"
BLOCK_SEPARATOR = "\n\n"

@dataclass(frozen=True)
class TerraformGenerationOutput:
    blocks: Tuple[str, ...]
    full_terraform_config: str
    owner_id_mapping: str | None = None

def instance_suffix(instance_number: int, total_instances: int) -> str:
    """'' for a single instance, else _001, _002, ... (at least 3 digits)."""
    if total_instances <= 1:
        return ""
    return f"_{instance_number:03d}"

# ---------- blocks ----------

def acl_profile_block(acl_id: str, acl_name: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_acl_profile" "{acl_id}" {{
  acl_profile_name                     = "{acl_name}"
  client_connect_default_action        = "allow"
  msg_vpn_name                         = {conf.msg_vpn_ref}
  subscribe_share_name_default_action  = "disallow"
}}'''

def authorization_group_block(auth_id: str, auth_name: str, acl_id: str,
                              client_profile_ref: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_authorization_group" "{auth_id}" {{
  acl_profile_name          = solacebroker_msg_vpn_acl_profile.{acl_id}.acl_profile_name
  authorization_group_name  = "{auth_name}"
  client_profile_name       = {client_profile_ref}
  enabled                   = true
  msg_vpn_name              = {conf.msg_vpn_ref}
}}'''

def publish_exception_block(acl_id: str, index: int, topic: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_acl_profile_publish_topic_exception" "{acl_id}_publish_exception_{index}" {{
  acl_profile_name                = solacebroker_msg_vpn_acl_profile.{acl_id}.acl_profile_name
  msg_vpn_name                    = {conf.msg_vpn_ref}
  publish_topic_exception         = "{topic}"
  publish_topic_exception_syntax  = "smf"
}}'''

def subscribe_exception_block(acl_id: str, index: int, topic: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_acl_profile_subscribe_topic_exception" "{acl_id}_subscribe_exception_{index}" {{
  acl_profile_name                  = solacebroker_msg_vpn_acl_profile.{acl_id}.acl_profile_name
  msg_vpn_name                      = {conf.msg_vpn_ref}
  subscribe_topic_exception         = "{topic}"
  subscribe_topic_exception_syntax  = "smf"
}}'''

def queue_block(queue_id: str, queue_name: str, owner_id: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_queue" "{queue_id}" {{
  egress_enabled                                 = true
  event_bind_count_threshold                     = {{ clear_percent = 60, set_percent = 80 }}
  event_msg_spool_usage_threshold                = {{ clear_percent = 18, set_percent = 25 }}
  event_reject_low_priority_msg_limit_threshold  = {{ clear_percent = 60, set_percent = 80 }}
  ingress_enabled                                = true
  max_msg_size                                   = 1e+06
  max_msg_spool_usage                            = {conf.max_msg_spool_usage}
  msg_vpn_name                                   = {conf.msg_vpn_ref}
  owner                                          = "{owner_id}"
  queue_name                                     = "{queue_name}"
}}'''

def queue_subscription_block(queue_id: str, index: int, topic: str, conf: GeneratorConf) -> str:
    return f'''resource "solacebroker_msg_vpn_queue_subscription" "{queue_id}_subscription_{index}" {{
  msg_vpn_name        = {conf.msg_vpn_ref}
  queue_name          = solacebroker_msg_vpn_queue.{queue_id}.queue_name
  subscription_topic  = "{topic}"
}}'''

# ---------- main ----------

def _mapping_line(i: int, acl_name: str, queue_name: str | None, owner: str | None) -> str:
    queue = f", Queue: {queue_name}" if queue_name else ""
    shown = owner if owner is not None else "Error - ID not fetched"
    return f"Instance {i} (ACL: {acl_name}{queue}): {shown}"

def _instance_blocks(values: ProfileConfiguratorValues, suffix: str,
                     owner_id: str | None, conf: GeneratorConf) -> List[str]:
    acl_name = values.acl_profile_name + suffix
    auth_name = values.auth_profile_name + suffix
    queue_name = values.queue_name + suffix if values.queue_name else None

    acl_id = sanitize_resource_name(acl_name)
    auth_id = sanitize_resource_name(auth_name)
    topics = [hcl_topic(t, conf.topic_escape) for t in values.topics]

    if values.application_type == PUBLISHER:
        client_profile_ref = conf.publisher_client_profile_ref
        exception_block = publish_exception_block
    else:
        client_profile_ref = conf.subscriber_client_profile_ref
        exception_block = subscribe_exception_block

    blocks = [
        acl_profile_block(acl_id, hcl_string(acl_name), conf),
        authorization_group_block(auth_id, hcl_string(auth_name), acl_id, client_profile_ref, conf),
    ]
    blocks += [exception_block(acl_id, idx, t, conf) for idx, t in enumerate(topics)]

    if values.is_subscriber and queue_name and owner_id:
        queue_id = sanitize_resource_name(queue_name)
        blocks.append(queue_block(queue_id, hcl_string(queue_name), hcl_string(owner_id), conf))
        blocks += [queue_subscription_block(queue_id, idx, t, conf) for idx, t in enumerate(topics)]
    return blocks

def generate_terraform_config(values: ProfileConfiguratorValues,
                              fetched_owner_ids: Optional[Sequence[Optional[str]]] = None,
                              conf: GeneratorConf | None = None) -> TerraformGenerationOutput:
    """Assemble the Terraform document for all instances.

    ``fetched_owner_ids[i]`` overrides ``values.owner_id`` for subscriber
    instance ``i + 1``; ``None`` there marks a failed identity lookup, which
    drops that instance's queue and is reported in the owner-id mapping.
    """
    conf = conf or build_config({}).generator
    total = max(values.number_of_instances or 1, 1)

    all_blocks: List[str] = []
    instance_docs: List[str] = []
    mapping: List[str] = []

    for i in range(1, total + 1):
        suffix = instance_suffix(i, total)
        owner_id = values.owner_id
        if values.is_subscriber and fetched_owner_ids is not None and i <= len(fetched_owner_ids):
            owner_id = fetched_owner_ids[i - 1]
            if total > 1:
                queue_name = values.queue_name + suffix if values.queue_name else None
                mapping.append(_mapping_line(i, values.acl_profile_name + suffix, queue_name, owner_id))

        blocks = _instance_blocks(values, suffix, owner_id, conf)
        all_blocks += blocks
        instance_docs.append(BLOCK_SEPARATOR.join(blocks))

    return TerraformGenerationOutput(
        blocks=tuple(all_blocks),
        full_terraform_config=INSTANCE_SEPARATOR.join(instance_docs),
        owner_id_mapping="\n".join(mapping).strip() or None,
    )
