"""
Tests for the webhook receiver
"""
import pytest
from presence.core.config import settings


@pytest.fixture
def webhook_token(monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_TOKEN", "rahasia-webhook")
    return "rahasia-webhook"


def test_webhook_accepts_valid_token(client, webhook_token):
    response = client.post(
        "/api/v1/webhook",
        json={"type": "attendance.sync", "data": {"id": 1}},
        headers={"x-webhook-token": webhook_token},
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True, "message": "Webhook received"}


def test_webhook_rejects_wrong_token(client, webhook_token):
    response = client.post("/api/v1/webhook", json={}, headers={"x-webhook-token": "salah"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_webhook_rejects_missing_token(client, webhook_token):
    response = client.post("/api/v1/webhook", json={})
    assert response.status_code == 401


def test_webhook_rejects_when_unconfigured(client, monkeypatch):
    monkeypatch.setattr(settings, "WEBHOOK_TOKEN", None)
    response = client.post("/api/v1/webhook", json={}, headers={"x-webhook-token": "anything"})
    assert response.status_code == 401


def test_webhook_rejects_invalid_json(client, webhook_token):
    response = client.post(
        "/api/v1/webhook",
        content=b"{not json",
        headers={"x-webhook-token": webhook_token, "content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Failed to process webhook"
