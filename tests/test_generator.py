"""Tests for profile_configurator.generator — Terraform block assembly."""

import re

from profile_configurator.config import build_config
from profile_configurator.generator import (
    INSTANCE_SEPARATOR,
    generate_terraform_config,
    instance_suffix,
)
from profile_configurator.schema import ProfileConfiguratorValues


def _values(**kw):
    base = dict(
        application_type="publisher",
        auth_profile_name="Orders Auth",
        acl_profile_name="Orders ACL",
        topics=("orders/created/>",),
    )
    base.update(kw)
    return ProfileConfiguratorValues(**base)


def _subscriber(**kw):
    base = dict(
        application_type="subscriber",
        auth_profile_name="Billing Auth",
        acl_profile_name="Billing ACL",
        queue_name="billing.q",
        owner_id="owner-123",
        topics=("orders/*/paid",),
    )
    base.update(kw)
    return ProfileConfiguratorValues(**base)


def _count(doc, resource_type):
    return len(re.findall(r'^resource "%s" ' % re.escape(resource_type), doc, flags=re.M))


class TestInstanceSuffix:

    def test_single_instance_has_no_suffix(self):
        assert instance_suffix(1, 1) == ""

    def test_padded_to_three_digits(self):
        assert instance_suffix(1, 3) == "_001"
        assert instance_suffix(42, 100) == "_042"

    def test_wider_numbers_not_truncated(self):
        assert instance_suffix(1000, 1000) == "_1000"


class TestPublisher:

    def test_one_topic_one_publish_exception(self):
        out = generate_terraform_config(_values())
        doc = out.full_terraform_config
        assert _count(doc, "solacebroker_msg_vpn_acl_profile_publish_topic_exception") == 1
        assert _count(doc, "solacebroker_msg_vpn_acl_profile_subscribe_topic_exception") == 0
        assert _count(doc, "solacebroker_msg_vpn_queue") == 0
        assert _count(doc, "solacebroker_msg_vpn_queue_subscription") == 0
        assert len(out.blocks) == 3

    def test_block_order(self):
        out = generate_terraform_config(_values(topics=("a", "b")))
        assert out.blocks[0].startswith('resource "solacebroker_msg_vpn_acl_profile" "orders_acl"')
        assert out.blocks[1].startswith('resource "solacebroker_msg_vpn_authorization_group" "orders_auth"')
        assert '"orders_acl_publish_exception_0"' in out.blocks[2]
        assert '"orders_acl_publish_exception_1"' in out.blocks[3]

    def test_original_names_kept_as_values(self):
        doc = generate_terraform_config(_values()).full_terraform_config
        assert 'acl_profile_name                     = "Orders ACL"' in doc
        assert 'authorization_group_name  = "Orders Auth"' in doc

    def test_auth_group_references_acl_and_publisher_client_profile(self):
        block = generate_terraform_config(_values()).blocks[1]
        assert "solacebroker_msg_vpn_acl_profile.orders_acl.acl_profile_name" in block
        assert "NEMS_01_publisher-client-profile.client_profile_name" in block

    def test_topic_gt_escaped(self):
        block = generate_terraform_config(_values()).blocks[2]
        assert 'publish_topic_exception         = "orders/created/\\u003e"' in block
        assert 'publish_topic_exception_syntax  = "smf"' in block

    def test_owner_id_ignored(self):
        out = generate_terraform_config(_values(owner_id="x", queue_name="q"), ["y"])
        assert _count(out.full_terraform_config, "solacebroker_msg_vpn_queue") == 0
        assert out.owner_id_mapping is None

    def test_blocks_joined_by_blank_line(self):
        out = generate_terraform_config(_values())
        assert out.full_terraform_config == "\n\n".join(out.blocks)


class TestSubscriber:

    def test_one_queue_one_subscription(self):
        doc = generate_terraform_config(_subscriber()).full_terraform_config
        assert _count(doc, "solacebroker_msg_vpn_acl_profile_subscribe_topic_exception") == 1
        assert _count(doc, "solacebroker_msg_vpn_acl_profile_publish_topic_exception") == 0
        assert _count(doc, "solacebroker_msg_vpn_queue") == 1
        assert _count(doc, "solacebroker_msg_vpn_queue_subscription") == 1

    def test_queue_fields(self):
        out = generate_terraform_config(_subscriber())
        queue = out.blocks[3]
        assert queue.startswith('resource "solacebroker_msg_vpn_queue" "billing_q"')
        assert 'owner                                          = "owner-123"' in queue
        assert 'queue_name                                     = "billing.q"' in queue
        assert "max_msg_spool_usage                            = 500" in queue
        assert "max_msg_size                                   = 1e+06" in queue

    def test_subscription_references_queue(self):
        sub = generate_terraform_config(_subscriber()).blocks[4]
        assert '"billing_q_subscription_0"' in sub
        assert "solacebroker_msg_vpn_queue.billing_q.queue_name" in sub
        assert 'subscription_topic  = "orders/*/paid"' in sub

    def test_subscriber_client_profile(self):
        block = generate_terraform_config(_subscriber()).blocks[1]
        assert "NEMS_01_subscriber-client-profile.client_profile_name" in block

    def test_no_owner_no_queue(self):
        doc = generate_terraform_config(_subscriber(owner_id=None)).full_terraform_config
        assert _count(doc, "solacebroker_msg_vpn_queue") == 0
        assert _count(doc, "solacebroker_msg_vpn_acl_profile_subscribe_topic_exception") == 1

    def test_no_queue_name_no_queue(self):
        doc = generate_terraform_config(_subscriber(queue_name=None)).full_terraform_config
        assert _count(doc, "solacebroker_msg_vpn_queue") == 0

    def test_fetched_owner_used_for_single_instance(self):
        out = generate_terraform_config(_subscriber(owner_id=None), ["fetched-1"])
        assert 'owner                                          = "fetched-1"' in out.full_terraform_config
        assert out.owner_id_mapping is None

    def test_subscription_per_topic(self):
        out = generate_terraform_config(_subscriber(topics=("a", "b", "c")))
        assert _count(out.full_terraform_config, "solacebroker_msg_vpn_queue_subscription") == 3
        assert len(out.blocks) == 2 + 3 + 1 + 3


class TestInstances:

    def test_suffixes_and_separator(self):
        out = generate_terraform_config(_values(number_of_instances=3))
        doc = out.full_terraform_config
        for sfx in ("_001", "_002", "_003"):
            assert '"orders_acl%s"' % sfx in doc
            assert 'acl_profile_name                     = "Orders ACL%s"' % sfx in doc
            assert '"orders_auth%s"' % sfx in doc
        assert doc.count(INSTANCE_SEPARATOR) == 2
        assert doc.count("# --- Next Profile Instance ---") == 2
        assert len(out.blocks) == 9

    def test_no_separator_for_single_instance(self):
        doc = generate_terraform_config(_values()).full_terraform_config
        assert "Next Profile Instance" not in doc

    def test_queue_suffixed(self):
        out = generate_terraform_config(_subscriber(number_of_instances=2), ["id-a", "id-b"])
        doc = out.full_terraform_config
        assert '"billing_q_001"' in doc
        assert 'queue_name                                     = "billing.q_002"' in doc
        assert 'owner                                          = "id-b"' in doc

    def test_owner_mapping(self):
        out = generate_terraform_config(_subscriber(number_of_instances=2), ["id-a", "id-b"])
        assert out.owner_id_mapping == (
            "Instance 1 (ACL: Billing ACL_001, Queue: billing.q_001): id-a\n"
            "Instance 2 (ACL: Billing ACL_002, Queue: billing.q_002): id-b"
        )

    def test_failed_fetch_drops_queue_and_is_reported(self):
        out = generate_terraform_config(_subscriber(number_of_instances=2), ["id-a", None])
        doc = out.full_terraform_config
        assert _count(doc, "solacebroker_msg_vpn_queue") == 1
        assert '"billing_q_002"' not in doc
        assert out.owner_id_mapping.splitlines()[1] == (
            "Instance 2 (ACL: Billing ACL_002, Queue: billing.q_002): Error - ID not fetched"
        )

    def test_without_fetched_ids_falls_back_to_owner_id(self):
        out = generate_terraform_config(_subscriber(number_of_instances=2))
        assert out.full_terraform_config.count('"owner-123"') == 2
        assert out.owner_id_mapping is None

    def test_short_fetched_list_falls_back_to_owner_id(self):
        out = generate_terraform_config(_subscriber(number_of_instances=2), ["id-a"])
        doc = out.full_terraform_config
        assert '"id-a"' in doc and '"owner-123"' in doc
        assert len(out.owner_id_mapping.splitlines()) == 1


class TestSettings:

    def test_custom_references(self):
        conf = build_config({"generator": {
            "msg_vpn_ref": "solacebroker_msg_vpn.OTHER.msg_vpn_name",
            "max_msg_spool_usage": 1500,
        }}).generator
        doc = generate_terraform_config(_subscriber(), conf=conf).full_terraform_config
        assert "NEMS_01.msg_vpn_name" not in doc
        assert "solacebroker_msg_vpn.OTHER.msg_vpn_name" in doc
        assert "= 1500" in doc

    def test_full_escape_mode(self):
        conf = build_config({"generator": {"topic_escape": "full"}}).generator
        block = generate_terraform_config(_values(topics=("a/b",)), conf=conf).blocks[2]
        assert '"a\\u002fb"' in block


def test_identical_input_identical_output():
    v = _subscriber(number_of_instances=3, topics=("a/>", "b/*"))
    ids = ["x", None, "z"]
    first = generate_terraform_config(v, ids)
    second = generate_terraform_config(v, list(ids))
    assert first == second
    assert first.full_terraform_config.encode() == second.full_terraform_config.encode()


class TestHclQuoting:

    def test_quote_in_profile_name(self):
        out = generate_terraform_config(_values(acl_profile_name='Orders "prod"'))
        assert 'acl_profile_name                     = "Orders \\"prod\\""' in out.blocks[0]
        assert '"orders__prod"' in out.blocks[0]

    def test_interpolation_in_auth_name(self):
        block = generate_terraform_config(_values(auth_profile_name="auth-${var.env}")).blocks[1]
        assert 'authorization_group_name  = "auth-$${var.env}"' in block

    def test_queue_and_owner_quoted(self):
        out = generate_terraform_config(_subscriber(queue_name='q"1', owner_id="o\\1"))
        queue = out.blocks[3]
        assert 'owner                                          = "o\\\\1"' in queue
        assert 'queue_name                                     = "q\\"1"' in queue

    def test_topic_quote_in_subscription(self):
        out = generate_terraform_config(_subscriber(topics=('a/"b"/>',)))
        assert 'subscription_topic  = "a/\\"b\\"/\\u003e"' in out.blocks[-1]

    def test_every_quoted_value_is_closed(self):
        v = _subscriber(acl_profile_name='x"', auth_profile_name='y\\', queue_name='"q',
                        owner_id='${o}', topics=('"', '\\', '${t}'))
        for line in generate_terraform_config(v).full_terraform_config.splitlines():
            if '= "' in line:
                body = line.split('= "', 1)[1]
                assert body.endswith('"')
                inner = body[:-1].replace("\\\\", "").replace('\\"', "")
                assert '"' not in inner
                assert "${" not in inner.replace("$${", "")
