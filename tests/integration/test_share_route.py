"""Integration tests for the public GET /share endpoint."""

import uuid
from urllib.parse import quote

from fastapi.testclient import TestClient

from backend.app.api.deps import Store
from backend.app.db.context import RequestContext
from backend.app.models import ExternalVideo, HeroVideo
from backend.app.publishing.service import PublishService
from backend.app.templates.seeds import seed_bubble

CTX = RequestContext(user_id="user-1")


def publish(store: Store, doc=None) -> tuple[str, str]:
    """Publish a document directly through the service; returns (doc_id, token)."""
    record = store.documents.create(doc or seed_bubble(), CTX)
    result = PublishService(store.documents, store.versions).publish(record.doc_id, CTX)
    return str(record.doc_id), result.token


def test_resolve_by_token(client: TestClient, store: Store) -> None:
    """Test that a token resolves without auth to the published message."""
    doc_id, token = publish(store)

    response = client.get("/share", params={"token": token, "autoshare": "1"})

    assert response.status_code == 200
    data = response.json()
    assert data["doc_id"] == doc_id
    assert data["version_no"] == 1
    assert data["autoshare"] is True
    assert data["messages"] == [data["flex_json"]]


def test_resolve_by_doc_id(client: TestClient, store: Store) -> None:
    doc_id, token = publish(store)

    data = client.get("/share", params={"id": doc_id}).json()

    assert data["token"] == token
    assert data["autoshare"] is False


def test_resolve_from_liff_state(client: TestClient, store: Store) -> None:
    """Test that parameters nested in liff.state are honored."""
    _, token = publish(store)
    state = quote(f"/share?token={token}&autoshare=1", safe="")

    response = client.get(f"/share?liff.state={state}")

    assert response.status_code == 200
    assert response.json()["token"] == token
    assert response.json()["autoshare"] is True


def test_retired_token_404(client: TestClient, store: Store) -> None:
    """Test that republishing retires the old token."""
    doc_id, old_token = publish(store)
    PublishService(store.documents, store.versions).publish(uuid.UUID(doc_id), CTX)

    assert client.get("/share", params={"token": old_token}).status_code == 404
    assert client.get("/share", params={"id": doc_id}).json()["version_no"] == 2


def test_missing_params_400(client: TestClient) -> None:
    assert client.get("/share").status_code == 400


def test_unknown_token_and_bad_id_404(client: TestClient) -> None:
    assert client.get("/share", params={"token": "nope"}).status_code == 404
    assert client.get("/share", params={"id": "not-a-uuid"}).status_code == 404


def test_video_bubble_split_into_two_messages(client: TestClient, store: Store) -> None:
    doc = seed_bubble()
    doc.bubble_size = "mega"
    doc.section.hero = [
        HeroVideo(
            id="v",
            video=ExternalVideo(url="https://cdn.example.com/v.mp4", preview_url="https://cdn.example.com/v.jpg"),
        )
    ]
    _, token = publish(store, doc)

    messages = client.get("/share", params={"token": token}).json()["messages"]

    assert [m["type"] for m in messages] == ["video", "flex"]
    assert messages[1]["contents"]["hero"]["type"] == "image"
