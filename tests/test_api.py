import pytest

from vault_api import create_app
from vault_api import routes

from conftest import RFC_SECRET


@pytest.fixture
def app(store):
    app = create_app(store=store)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr(routes.time, "time", lambda: 59.0)


def _save(client, name="rfc", secret=RFC_SECRET):
    return client.put(f"/api/secrets/{name}", json={"secret": secret})


def test_index(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.get_json()["service"] == "otp-vault"


def test_save_and_list(client):
    res = _save(client)
    assert res.status_code == 201
    assert res.get_json() == {"saved": "rfc"}
    assert client.get("/api/secrets").get_json() == {"names": ["rfc"]}


def test_save_requires_secret(client):
    res = client.put("/api/secrets/rfc", json={})
    assert res.status_code == 400
    assert res.get_json()["type"] == "InvalidArgumentError"


def test_otp(client, frozen_clock):
    _save(client)
    res = client.get("/api/otp/rfc?length=8")
    assert res.status_code == 200
    assert res.get_json() == {"name": "rfc", "code": "94287082", "valid_for": 1}


def test_otp_default_length(client, frozen_clock):
    _save(client)
    assert client.get("/api/otp/rfc").get_json()["code"] == "287082"


def test_otp_never_returns_secret(client, frozen_clock):
    _save(client)
    for res in (client.get("/api/otp/rfc"), client.get("/api/secrets"), client.get("/")):
        assert RFC_SECRET.encode() not in res.data


def test_otp_unknown(client):
    res = client.get("/api/otp/nonexistent")
    assert res.status_code == 404
    assert res.get_json()["type"] == "SecretNotFoundError"


@pytest.mark.parametrize("query", ["length=0", "length=abc", "length=11", "length=3000000", "window=0", "window=-1"])
def test_otp_bad_arguments(client, query):
    _save(client)
    res = client.get(f"/api/otp/rfc?{query}")
    assert res.status_code == 400
    assert res.get_json()["type"] == "InvalidArgumentError"


def test_otp_invalid_secret(client):
    _save(client, "bad", "GEZDGNB1")
    res = client.get("/api/otp/bad")
    assert res.status_code == 400
    assert res.get_json()["type"] == "InvalidSecretError"


def test_verify(client, frozen_clock):
    _save(client)
    assert client.post("/api/verify/rfc", json={"code": "287082"}).get_json() == {"valid": True}
    assert client.post("/api/verify/rfc", json={"code": "755224"}).get_json() == {"valid": False}
    assert client.post("/api/verify/rfc", json={"code": "94287082", "length": 8}).get_json() == {"valid": True}


def test_verify_requires_code(client):
    _save(client)
    assert client.post("/api/verify/rfc", json={"code": 287082}).status_code == 400


def test_otp_longest_length(client, frozen_clock):
    _save(client)
    res = client.get("/api/otp/rfc?length=10")
    assert res.status_code == 200
    # 31-bit value padded to 10 digits; the 8-digit RFC code is its suffix
    assert len(res.get_json()["code"]) == 10
    assert res.get_json()["code"].endswith("94287082")


@pytest.mark.parametrize("body", [
    {"code": "287082", "length": 6.9},
    {"code": "287082", "length": 6.0},
    {"code": "287082", "length": True},
    {"code": "287082", "length": 11},
    {"code": "287082", "window": 30.5},
])
def test_verify_rejects_non_integral_or_oversized_arguments(client, frozen_clock, body):
    _save(client)
    res = client.post("/api/verify/rfc", json=body)
    assert res.status_code == 400
    assert res.get_json()["type"] == "InvalidArgumentError"
