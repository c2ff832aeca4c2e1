"""Tests for the demo application."""

from unittest.mock import Mock

from fastapi.testclient import TestClient

from lnpaywall.config import PaywallSettings
from lnpaywall.main import HEALTH_ROUTE, PAID_ROUTE, create_app


def _settings(**overrides):
    values = {"amount": 21, "memo": "ping", "log_level": "WARNING"}
    values.update(overrides)
    return PaywallSettings(**values)


def test_health_check_is_free(lightning, store):
    client = TestClient(create_app(_settings(), verifier=lightning, store=store))

    response = client.get(HEALTH_ROUTE)

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert lightning.issued == []


def test_paid_route(lightning, store):
    client = TestClient(create_app(_settings(), verifier=lightning, store=store))

    challenge = client.get(PAID_ROUTE)
    assert challenge.status_code == 402
    assert challenge.json()["amount"] == 21
    assert challenge.json()["memo"] == "ping"

    proof = lightning.proof_for(challenge.json()["paymentRequest"])
    lightning.settle(proof)

    paid = client.get(PAID_ROUTE, headers={"X-Preimage": proof})
    assert paid.status_code == 200
    assert paid.json() == {"message": "pong"}


def test_storage_from_settings_is_closed_on_shutdown(lightning, tmp_path):
    settings = _settings(storage_url=f"sqlite://{tmp_path}/used.db")

    with TestClient(create_app(settings, verifier=lightning)) as client:
        assert client.get(HEALTH_ROUTE).status_code == 200

    assert (tmp_path / "used.db").exists()


def test_injected_resources_are_not_closed(lightning):
    store = Mock()

    with TestClient(create_app(_settings(), verifier=lightning, store=store)):
        pass

    store.close.assert_not_called()
