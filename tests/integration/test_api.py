"""Integration tests for API endpoints"""

import asyncio
from typing import List
import pytest
from fastapi.testclient import TestClient
from dealshield.api.v1.analysis import DEFAULT_PLAN_STEP
from dealshield.config import settings
from dealshield.domain.models import Entity
from dealshield.domain.reply import CRYPTO_ITEM, LINKS_ITEM


class SlowEntityRecognizer:
    """Recognizer that never answers within the budget"""

    async def recognize(self, text: str) -> List[Entity]:
        await asyncio.sleep(5)
        return []


class EmptyEntityRecognizer:
    """Recognizer that works but finds nothing"""

    async def recognize(self, text: str) -> List[Entity]:
        return []


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "dealshield"}


def test_metrics_endpoint(client: TestClient, clean_deal: str):
    """Test Prometheus metrics endpoint"""
    client.post("/v1/analyze", json={"text": clean_deal})
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "dealshield_analysis_total" in response.text
    assert "dealshield_risk_score" in response.text


def test_request_id_propagated(client: TestClient):
    """Test caller request IDs are echoed and missing ones are minted"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_analyze_clean_deal(client: TestClient, clean_deal: str):
    """Test POST /v1/analyze with a well-specified deal"""
    response = client.post("/v1/analyze", json={"text": clean_deal})

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 10
    assert data["tier"] == "LOW"
    assert data["reasons"] == []
    assert data["plan"] == [DEFAULT_PLAN_STEP]
    assert data["snapshot"] == {
        "parties": "Omar (PERSON), Sarah (PERSON), Northwind Studio (ORGANIZATION)",
        "amount": "$1,200",
        "deadline": "in 10 days",
        "payment": "Bank transfer",
        "links": [],
    }
    assert data["mode"] == "ai+rules"
    assert data["highlights"] == []
    assert data["reply"].startswith("Hi, thanks for the update.")


def test_analyze_bank_change(client: TestClient, bank_change: str):
    """Test payment-details change request is flagged HIGH"""
    response = client.post("/v1/analyze", json={"text": bank_change})

    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "HIGH"
    assert data["score"] >= 70

    # Display order: heaviest signal first
    assert data["reasons"][0]["label"] == "Payment details change request"
    assert data["reasons"][0]["points"] == 30
    points = [r["points"] for r in data["reasons"]]
    assert points == sorted(points, reverse=True)

    highlighted = {h["text"] for h in data["highlights"]}
    assert {"bank details have changed", "NEW account", "confidential", "rush"} <= highlighted
    assert "<mark>bank details have changed</mark>" in data["highlighted_html"]


def test_analyze_advance_fee(client: TestClient, advance_fee: str):
    """Test advance-fee message gets both optional reply items"""
    response = client.post("/v1/analyze", json={"text": advance_fee})

    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "HIGH"
    assert data["score"] == 100
    assert data["snapshot"]["payment"] == "Crypto"
    assert data["snapshot"]["links"] == ["bit.ly/pay-confirm"]
    assert LINKS_ITEM in data["reply"]
    assert CRYPTO_ITEM in data["reply"]
    assert "<mark>bit.ly/pay-confirm</mark>" in data["highlighted_html"]


def test_analyze_text_is_stripped(client: TestClient):
    """Test surrounding whitespace does not shift highlight offsets"""
    response = client.post("/v1/analyze", json={"text": "   asap please   "})

    assert response.status_code == 200
    assert response.json()["highlights"] == [{"start": 0, "end": 4, "text": "asap"}]


@pytest.mark.parametrize("body", [{"text": ""}, {"text": "   \n\t "}, {}])
def test_analyze_rejects_blank_text(client: TestClient, body: dict):
    """Test empty or whitespace-only input is rejected before analysis"""
    response = client.post("/v1/analyze", json=body)
    assert response.status_code == 422


def test_analyze_rules_only_when_recognizer_fails(rules_only_client: TestClient, bank_change: str):
    """Test recognizer failure downgrades parties without failing the request"""
    response = rules_only_client.post("/v1/analyze", json={"text": bank_change})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "rules-only"
    assert data["snapshot"]["parties"] is None
    assert data["tier"] == "HIGH"


def test_analyze_rules_only_when_recognizer_times_out(make_client, monkeypatch, clean_deal: str):
    """Test a slow recognizer is abandoned after the configured budget"""
    monkeypatch.setattr(settings, "ner_timeout_seconds", 0.05)
    client = make_client(SlowEntityRecognizer())

    response = client.post("/v1/analyze", json={"text": clean_deal})

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "rules-only"
    assert data["snapshot"]["parties"] is None
    assert data["snapshot"]["amount"] == "$1,200"


def test_analyze_recognizer_without_entities(make_client, clean_deal: str):
    """Test a working recognizer with no entities still reports ai+rules"""
    client = make_client(EmptyEntityRecognizer())

    data = client.post("/v1/analyze", json={"text": clean_deal}).json()

    assert data["mode"] == "ai+rules"
    assert data["snapshot"]["parties"] is None
