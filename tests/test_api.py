"""HTTP-level tests for the contact API."""

import json
from pathlib import Path

import httpx
import pytest

from ai_reply import AiReplyBridge
from auth import EnvCredentialVerifier
from database import JsonFileStore
from main import app, get_ai_bridge, get_service, get_verifier
from service import SubmissionService


def test_root(client) -> None:
    assert client.get("/").json() == {"message": "Contact App API is running"}


def test_health_reports_store(client, valid_form: dict) -> None:
    client.post("/api/contact", json=valid_form)
    body = client.get("/health").json()
    assert body["backend"] == "running"
    assert body["submissions"] == 1
    assert body["store"].endswith("data.json")


class TestContactLifecycle:
    def test_end_to_end(self, client, valid_form: dict, data_file: Path) -> None:
        r = client.post("/api/contact", json=valid_form)
        assert r.status_code == 201
        assert r.json() == {"id": 1, "message": "Thank you for your message!"}

        submissions = client.get("/api/contact").json()["submissions"]
        assert len(submissions) == 1
        assert submissions[0]["status"] == "new"
        assert submissions[0]["createdAt"].endswith("Z")

        r = client.patch("/api/contact/1/resolve")
        assert r.status_code == 200
        assert r.json()["message"] == "Submission resolved"
        assert r.json()["submission"]["status"] == "resolved"

        r = client.delete("/api/contact/1")
        assert r.status_code == 200
        assert r.json() == {"message": "Submission deleted"}
        assert client.get("/api/contact").json() == {"submissions": []}

        r = client.delete("/api/contact/1")
        assert r.status_code == 404
        assert r.json() == {"message": "Submission not found"}

    def test_invalid_submission_returns_all_field_errors(self, client, data_file: Path) -> None:
        r = client.post(
            "/api/contact",
            json={"name": "A", "email": "bad", "subject": "Nope", "message": "short"},
        )
        assert r.status_code == 400
        assert r.json() == {
            "errors": {
                "name": "Name must be at least 2 characters.",
                "email": "Invalid email format.",
                "subject": "Invalid subject selection.",
                "message": "Message must be at least 10 characters.",
            }
        }
        assert not data_file.exists()

    def test_empty_body_object_fails_every_field(self, client) -> None:
        r = client.post("/api/contact", json={})
        assert r.status_code == 400
        assert set(r.json()["errors"]) == {"name", "email", "subject", "message"}

    def test_wrong_type_uses_field_message(self, client, valid_form: dict) -> None:
        valid_form["name"] = 12345
        r = client.post("/api/contact", json=valid_form)
        assert r.status_code == 400
        assert r.json() == {"errors": {"name": "Name must be at least 2 characters."}}

    def test_list_newest_first(self, client, valid_form: dict) -> None:
        for _ in range(3):
            client.post("/api/contact", json=valid_form)
        ids = [s["id"] for s in client.get("/api/contact").json()["submissions"]]
        assert ids == [3, 2, 1]

    def test_resolve_unknown_id(self, client, valid_form: dict) -> None:
        client.post("/api/contact", json=valid_form)
        r = client.patch("/api/contact/42/resolve")
        assert r.status_code == 404
        assert r.json() == {"message": "Submission not found"}
        assert client.get("/api/contact").json()["submissions"][0]["status"] == "new"

    @pytest.mark.parametrize("method,path", [("patch", "/api/contact/abc/resolve"), ("delete", "/api/contact/abc")])
    def test_non_numeric_id_is_not_found(self, client, method: str, path: str) -> None:
        r = getattr(client, method)(path)
        assert r.status_code == 404


def test_storage_failure_is_generic_500(tmp_path: Path, valid_form: dict) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    service = SubmissionService(JsonFileStore(blocker / "data.json"))
    app.dependency_overrides[get_service] = lambda: service
    try:
        from fastapi.testclient import TestClient

        r = TestClient(app).post("/api/contact", json=valid_form)
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}


def _gemini_reply(text: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})

    return httpx.MockTransport(handler)


class TestAiReply:
    def test_returns_generated_text(self, client, data_file: Path) -> None:
        bridge = AiReplyBridge("test-key", transport=_gemini_reply("Dear Jo, thanks!"))
        app.dependency_overrides[get_ai_bridge] = lambda: bridge
        r = client.post("/api/ai-reply", json={"name": "Jo", "subject": "Feedback", "message": "Great app"})
        assert r.status_code == 200
        assert r.json() == {"reply": "Dear Jo, thanks!"}
        assert not data_file.exists()

    def test_missing_key(self, client) -> None:
        app.dependency_overrides[get_ai_bridge] = lambda: AiReplyBridge(None)
        r = client.post("/api/ai-reply", json={"name": "Jo", "subject": "Feedback", "message": "Hi"})
        assert r.status_code == 500
        assert r.json() == {"error": "Server missing API Key."}

    def test_provider_failure_keeps_submissions(self, client, valid_form: dict) -> None:
        client.post("/api/contact", json=valid_form)
        failing = httpx.MockTransport(lambda request: httpx.Response(503, json={"error": "down"}))
        app.dependency_overrides[get_ai_bridge] = lambda: AiReplyBridge("test-key", transport=failing)
        r = client.post("/api/ai-reply", json={"name": "Jo", "subject": "Feedback", "message": "Hi"})
        assert r.status_code == 500
        assert r.json() == {"error": "Failed to generate AI reply."}
        submissions = client.get("/api/contact").json()["submissions"]
        assert [s["status"] for s in submissions] == ["new"]


class TestAdminLogin:
    @pytest.fixture(autouse=True)
    def verifier(self, client):
        app.dependency_overrides[get_verifier] = lambda: EnvCredentialVerifier("admin@example.com", "s3cret")

    def test_accepts_configured_credentials(self, client) -> None:
        r = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "s3cret"})
        assert r.status_code == 200
        assert r.json() == {"authorized": True}

    def test_rejects_wrong_password(self, client) -> None:
        r = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "nope"})
        assert r.status_code == 401
        assert r.json()["authorized"] is False


def test_wrong_type_does_not_hide_other_field_errors(client, valid_form: dict, data_file: Path) -> None:
    valid_form["name"] = 12345
    valid_form["email"] = "bad"
    r = client.post("/api/contact", json=valid_form)
    assert r.status_code == 400
    assert r.json() == {
        "errors": {
            "name": "Name must be at least 2 characters.",
            "email": "Invalid email format.",
        }
    }
    assert not data_file.exists()


def test_bad_created_at_in_store_lists_empty(client, data_file: Path) -> None:
    record = {
        "id": 1,
        "name": "Jo Lee",
        "email": "jo@example.com",
        "subject": "Feedback",
        "message": "This is a test message body.",
        "status": "new",
        "createdAt": "yesterday",
    }
    data_file.write_text(json.dumps({"submissions": [record]}), encoding="utf-8")
    r = client.get("/api/contact")
    assert r.status_code == 200
    assert r.json() == {"submissions": []}
