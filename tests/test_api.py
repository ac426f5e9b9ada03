from fastapi.testclient import TestClient

from cyber_ai.main import create_app
from cyber_ai.models.domain import InsertConversation
from cyber_ai.services.llm_service import ResponseGenerator

from .conftest import CHAT_REPLY


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "Cyber AI"}


def test_chat_hello_creates_conversation(client, storage):
    resp = client.post("/api/chat", json={"message": "Hello"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["conversationId"]
    assert body["response"] == CHAT_REPLY
    assert len(storage.get_all_conversations()) == 1
    assert len(storage.get_messages_by_conversation(body["conversationId"])) == 2


def test_chat_continues_conversation(client, storage):
    first = client.post("/api/chat", json={"message": "Hello"}).json()

    resp = client.post("/api/chat", json={"message": "More", "conversationId": first["conversationId"]})

    assert resp.status_code == 200
    assert resp.json()["conversationId"] == first["conversationId"]
    assert len(storage.get_all_conversations()) == 1

    messages = client.get(f"/api/conversations/{first['conversationId']}/messages").json()
    assert [m["role"] for m in messages] == ["user", "assistant", "user", "assistant"]
    assert messages[2]["content"] == "More"
    assert set(messages[0]) == {"id", "conversationId", "role", "content", "timestamp"}


def test_chat_rejects_malformed_body(client, storage):
    for payload in ({}, {"message": ""}, {"message": 42}, {"message": "hi", "conversationId": 7}):
        resp = client.post("/api/chat", json=payload)
        assert resp.status_code == 400, payload
        assert resp.json()["error"].startswith("Invalid request")
    assert storage.get_all_conversations() == []


def test_chat_rejects_invalid_json(client):
    resp = client.post("/api/chat", content=b"{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_chat_without_credential_returns_400_and_stores_nothing(settings, storage):
    app = create_app(settings=settings, storage=storage, generator=ResponseGenerator(api_key=None))
    client = TestClient(app)

    resp = client.post("/api/chat", json={"message": "hi"})

    assert resp.status_code == 400
    assert "GEMINI_API_KEY" in resp.json()["error"]
    assert storage.get_all_conversations() == []
    assert storage._messages == {}


def test_chat_provider_error_returns_400(client, genai_client, storage):
    genai_client.aio.models.generate_content.side_effect = RuntimeError("429 rate exceeded")

    resp = client.post("/api/chat", json={"message": "hi"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Rate limit exceeded. Please wait a moment before sending another message."}
    assert storage.get_all_conversations() == []


def test_chat_unexpected_error_returns_500(client, storage, monkeypatch):
    def explode(_):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(storage, "create_conversation", explode)

    resp = client.post("/api/chat", json={"message": "hi"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "An unexpected error occurred while processing your request."}


def test_list_conversations_newest_first(client, storage):
    for title in ("first", "second", "third"):
        storage.create_conversation(InsertConversation(title=title))

    resp = client.get("/api/conversations")

    assert resp.status_code == 200
    created = [c["createdAt"] for c in resp.json()]
    assert len(created) == 3
    assert created == sorted(created, reverse=True)
    assert set(resp.json()[0]) == {"id", "title", "createdAt"}


def test_list_conversations_failure_returns_500(client, storage, monkeypatch):
    def explode():
        raise RuntimeError("nope")

    monkeypatch.setattr(storage, "get_all_conversations", explode)

    resp = client.get("/api/conversations")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch conversations"}


def test_messages_for_unknown_conversation_is_empty(client):
    resp = client.get("/api/conversations/nope/messages")

    assert resp.status_code == 200
    assert resp.json() == []


def test_delete_conversation(client, storage):
    conv_id = client.post("/api/chat", json={"message": "Hello"}).json()["conversationId"]

    resp = client.delete(f"/api/conversations/{conv_id}")

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert client.get("/api/conversations").json() == []
    assert client.get(f"/api/conversations/{conv_id}/messages").json() == []


def test_delete_unknown_conversation_succeeds(client):
    resp = client.delete("/api/conversations/ghost")

    assert resp.status_code == 200
    assert resp.json() == {"success": True}


def test_delete_failure_returns_500(client, storage, monkeypatch):
    def explode(_):
        raise RuntimeError("nope")

    monkeypatch.setattr(storage, "delete_conversation", explode)

    resp = client.delete("/api/conversations/x")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to delete conversation"}


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/nothing-here")

    assert resp.status_code == 404
    assert "error" in resp.json()
