"""Integration tests for /flex endpoints."""

from fastapi.testclient import TestClient

from backend.app.templates.seeds import seed_bubble, seed_carousel


def test_validate_returns_report(client: TestClient) -> None:
    document = seed_bubble().to_json_dict()
    document["section"]["body"][0]["text"] = ""

    response = client.post("/flex/validate", json=document)

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "draft"
    assert data["errors"][0] == {
        "code": "E_TITLE_EMPTY",
        "level": "error",
        "message": "Title text is required.",
        "path": "section.body[0].text",
    }


def test_publishable_escalates_unconfirmed_image(client: TestClient) -> None:
    document = seed_bubble().to_json_dict()
    document["section"]["hero"][0]["image"] = {"kind": "external", "url": "http://example.com/a.png"}

    validate = client.post("/flex/validate", json=document).json()
    gate = client.post("/flex/publishable", json=document).json()

    assert validate["status"] == "previewable"
    assert gate["ok"] is False
    assert gate["errors"][0]["code"] == "E_IMAGE_PUBLISH_BLOCK"


def test_schema_mismatch_422(client: TestClient) -> None:
    """Test that structurally malformed documents are rejected before validation."""
    response = client.post("/flex/validate", json={"type": "bubble", "section": {"body": [{"kind": "marquee", "id": "x"}]}})
    assert response.status_code == 422


def test_compile_carousel(client: TestClient) -> None:
    response = client.post(
        "/flex/compile",
        json={"document": seed_carousel(2).to_json_dict(), "altText": "Our plans"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["altText"] == "Our plans"
    assert data["contents"]["type"] == "carousel"
    assert len(data["contents"]["contents"]) == 2


def test_compile_draft_still_compiles(client: TestClient) -> None:
    """Test that previews of drafts with errors still compile."""
    document = seed_bubble().to_json_dict()
    document["section"]["body"][0]["text"] = ""

    assert client.post("/flex/compile", json={"document": document}).status_code == 200


def test_compile_folder_400(client: TestClient) -> None:
    response = client.post("/flex/compile", json={"document": {"type": "folder", "id": "f", "name": "F"}})
    assert response.status_code == 400
