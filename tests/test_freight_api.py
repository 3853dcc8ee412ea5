import asyncio

import pytest
from fastapi.testclient import TestClient

from src.api.endpoints.freight import get_engine
from src.api.main import app
from src.integrations.clients.mocks.ssw import MockSswClient
from src.integrations.contracts.freight import SoapTransport
from src.integrations.freight.engine import FreightEngine
from src.integrations.freight.errors import TransportError


class FailingTransport(SoapTransport):
    def __init__(self, exc):
        self.exc = exc

    async def send(self, envelope, soap_action):
        raise self.exc


class SlowTransport(SoapTransport):
    async def send(self, envelope, soap_action):
        await asyncio.sleep(1)
        return ""


@pytest.fixture
def use_engine(monkeypatch):
    monkeypatch.delenv("API_KEYS", raising=False)

    def install(engine):
        app.dependency_overrides[get_engine] = lambda: engine
        return TestClient(app)

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client(use_engine, engine):
    return use_engine(engine)


def test_quote_success(client, valid_payload):
    response = client.post("/api/v1/freight/quote", json=valid_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["freightValue"] == 78.25
    assert body["deadlineDays"] == 3
    assert body["quotationNumber"] == "900001"


def test_legacy_path_serves_the_same_operation(client, valid_payload):
    response = client.post("/api/cotacao", json=valid_payload)
    assert response.status_code == 200
    assert response.json()["token"] == "MOCK-TOKEN-0001"


def test_invalid_payload_is_400(client):
    response = client.post("/api/v1/freight/quote", json={"weight": 2})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "VALIDATION_FAILED"
    assert body["violations"]


def test_missing_body_is_400(client):
    response = client.post("/api/v1/freight/collection")
    assert response.status_code == 400


def test_only_post_is_served(client):
    assert client.get("/api/v1/freight/quote").status_code == 405
    assert client.get("/api/coleta").status_code == 405


def test_business_failure_is_422(client):
    response = client.post(
        "/api/v1/freight/collection",
        json={"cotacao": "900001", "token": "WRONG", "solicitante": "Ana", "data": "2024-05-10"},
    )

    assert response.status_code == 422
    assert response.json()["outcomeCode"] == 12


def test_protocol_failure_is_502(use_engine, ssw_config, valid_payload):
    client = use_engine(FreightEngine(MockSswClient(reply="<html>down</html>"), ssw_config))

    response = client.post("/api/v1/freight/quote", json=valid_payload)

    assert response.status_code == 502
    assert response.json()["rawBodyPrefix"] == "<html>down</html>"


def test_transport_failure_is_502(use_engine, ssw_config, valid_payload):
    client = use_engine(FreightEngine(FailingTransport(TransportError("connection refused")), ssw_config))

    response = client.post("/api/v1/freight/quote", json=valid_payload)

    assert response.status_code == 502
    body = response.json()
    assert body["code"] == "TRANSPORT_FAILED"
    assert body["sentArgs"]["senha"] == "***"


def test_timeout_is_504(use_engine, ssw_config, valid_payload):
    config = ssw_config.model_copy(update={"timeout_seconds": 0.05})
    client = use_engine(FreightEngine(SlowTransport(), config))

    response = client.post("/api/v1/freight/quote", json=valid_payload)

    assert response.status_code == 504


def test_unexpected_error_is_500(use_engine, ssw_config, valid_payload):
    client = use_engine(FreightEngine(FailingTransport(RuntimeError("boom")), ssw_config))

    response = client.post("/api/v1/freight/quote", json=valid_payload)

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"


def test_api_key_is_enforced_when_configured(client, monkeypatch, valid_payload):
    monkeypatch.setenv("API_KEYS", "k1,k2")

    assert client.post("/api/v1/freight/quote", json=valid_payload).status_code == 401
    ok = client.post("/api/v1/freight/quote", json=valid_payload, headers={"X-API-KEY": "k2"})
    assert ok.status_code == 200
    assert client.get("/health").status_code == 200


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_out_of_range_numbers_are_400_not_500(client, valid_payload):
    payload = dict(valid_payload, merchandiseValue=1e30, quantity="1e2000000")

    response = client.post("/api/v1/freight/quote", json=payload)

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_FAILED"
