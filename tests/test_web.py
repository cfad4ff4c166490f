import pytest
from fastapi.testclient import TestClient

from fakes import FakeRegistration, FakeSafeBrowsing, FakeTLS
from trustcheck import web
from trustcheck.scoring.engine import Validator


@pytest.fixture
def client(monkeypatch, rules, exchanges):
    validator = Validator(
        rules=rules,
        exchanges=exchanges,
        registration=FakeRegistration(),
        tls=FakeTLS(),
        safe_browsing=FakeSafeBrowsing(),
        cache_ttl=0,
    )

    def analyze(domain, request_type):
        return validator.validate(domain, request_type).to_dict()

    monkeypatch.setattr(web, "analyze_domain", analyze)
    return TestClient(web.app)


class TestApi:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_post_general(self, client):
        resp = client.post("/api/v1/validate", json={"domain": "https://www.google.com/"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["domain"] == "google.com"
        assert body["status"] == "safe"
        assert "malicious_site" in body["checks"]

    def test_post_crypto_exchange(self, client):
        resp = client.post("/api/v1/validate", json={"domain": "upbit.com", "type": "crypto"})
        body = resp.json()
        assert body["final_score"] == 100
        assert list(body["checks"]) == ["exchange"]

    def test_get_with_type(self, client):
        resp = client.get("/api/v1/validate/binanse.com", params={"type": "crypto"})
        assert resp.status_code == 200
        assert resp.json()["checks"]["typosquatting"]["passed"] is False

    def test_empty_domain(self, client):
        resp = client.post("/api/v1/validate", json={"domain": ""})
        assert resp.status_code == 400

    def test_malformed_domain(self, client):
        assert client.get("/api/v1/validate/localhost").status_code == 400

    def test_unknown_type(self, client):
        resp = client.post("/api/v1/validate", json={"domain": "google.com", "type": "stocks"})
        assert resp.status_code == 422
