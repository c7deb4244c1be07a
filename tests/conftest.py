"""Shared fixtures: configs, Flask test client, sample form payloads."""

import pytest

from profile_configurator import create_app
from profile_configurator.config import build_config


@pytest.fixture
def cfg():
    return build_config({
        "keycloak": {"create_client_endpoint_url": "https://idp.example.test/clients"},
    })


@pytest.fixture
def client(cfg):
    app = create_app(cfg)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def publisher_payload():
    return {
        "applicationType": "publisher",
        "authProfileName": "Orders Auth",
        "aclProfileName": "Orders ACL",
        "topics": [{"value": "orders/created/>"}],
    }


@pytest.fixture
def subscriber_payload():
    return {
        "applicationType": "subscriber",
        "authProfileName": "Billing Auth",
        "aclProfileName": "Billing ACL",
        "queueName": "billing.q",
        "ownerId": "owner-123",
        "topics": [{"value": "orders/*/paid"}],
    }
