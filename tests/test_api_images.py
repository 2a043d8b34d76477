"""Tests for images API endpoints.

Invariants:
1. Refining never modifies the source image; it stores a new one linked to it
2. Listings leave image data out
3. Deleting a source image keeps its refinements
"""

import base64

import pytest
from fastapi.testclient import TestClient

from postforge.api.app import create_app
from postforge.models.types import ImageRequest, ImageResult
from postforge.providers.base import ImageProviderBase
from postforge.workflow.images import aspect_ratio


class RecordingImageProvider(ImageProviderBase):
    """Image provider that records requests and echoes the prompt as PNG-typed bytes."""

    name = "recording-image"

    def __init__(self):
        self.requests: list[ImageRequest] = []

    def generate_image(self, request: ImageRequest) -> ImageResult:
        self.requests.append(request)
        return ImageResult(
            image_data=request.prompt.encode("utf-8"),
            mime_type="image/png",
            width=request.width,
            height=request.height,
        )


def create_session(client, idea="How AI is changing hiring") -> str:
    return client.post("/api/sessions", json={"original_idea": idea}).json()["id"]


def generate(client, session_id, prompt="Chart of hiring trends", **extra):
    response = client.post(
        "/api/images/generate", json={"session_id": session_id, "prompt": prompt, **extra}
    )
    assert response.status_code == 201
    return response.json()


class TestAspectRatio:
    @pytest.mark.parametrize(
        "width,height,expected",
        [
            (1920, 1080, "16:9"),
            (1080, 1920, "9:16"),
            (1200, 1000, "4:3"),
            (1000, 1200, "3:4"),
            (1024, 1024, "1:1"),
            (1500, 1000, "4:3"),
        ],
    )
    def test_ratios(self, width, height, expected):
        assert aspect_ratio(width, height) == expected


class TestGenerateImage:
    """Tests for POST /api/images/generate."""

    def test_generate_with_placeholder_provider(self, client):
        session_id = create_session(client)

        data = generate(client, session_id, width=1600, height=900, visual_concept_index=1)

        assert data["session_id"] == session_id
        assert data["prompt"] == "Chart of hiring trends"
        assert data["model"] == "placeholder"
        assert data["mime_type"] == "image/svg+xml"
        assert (data["width"], data["height"]) == (1600, 900)
        assert data["visual_concept_index"] == 1
        assert data["parent_image_id"] is None
        assert base64.b64decode(data["image_data"]).startswith(b"<svg")

    def test_provider_receives_size_and_ratio(self, database):
        provider = RecordingImageProvider()
        client = TestClient(create_app(database, image_provider=provider))
        session_id = create_session(client)

        generate(client, session_id, width=1080, height=1920)

        request = provider.requests[0]
        assert request.aspect_ratio == "9:16"
        assert request.source_image is None

    def test_unknown_session_returns_404(self, client):
        response = client.post(
            "/api/images/generate", json={"session_id": "missing", "prompt": "Chart"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found"

    @pytest.mark.parametrize(
        "body",
        [
            {"prompt": "Chart"},
            {"session_id": "s1", "prompt": ""},
            {"session_id": "s1", "prompt": "Chart", "width": 10},
            {"session_id": "s1", "prompt": "Chart", "visual_concept_index": -1},
        ],
    )
    def test_invalid_request_rejected(self, client, body):
        response = client.post("/api/images/generate", json=body)

        assert response.status_code == 422


class TestRefineImage:
    """Tests for POST /api/images/refine."""

    def test_refine_creates_linked_image(self, database):
        provider = RecordingImageProvider()
        client = TestClient(create_app(database, image_provider=provider))
        session_id = create_session(client)
        original = generate(client, session_id, width=1200, height=1000, visual_concept_index=0)

        response = client.post(
            "/api/images/refine",
            json={"image_id": original["id"], "refinement_prompt": "Use brand colors"},
        )

        assert response.status_code == 201
        refined = response.json()
        assert refined["id"] != original["id"]
        assert refined["parent_image_id"] == original["id"]
        assert refined["session_id"] == session_id
        assert refined["prompt"] == "Chart of hiring trends\n\nRefinements: Use brand colors"
        assert (refined["width"], refined["height"]) == (1200, 1000)
        assert refined["visual_concept_index"] == 0
        assert provider.requests[1].source_image == b"Chart of hiring trends"

    def test_source_image_unchanged(self, client):
        session_id = create_session(client)
        original = generate(client, session_id)

        client.post(
            "/api/images/refine",
            json={"image_id": original["id"], "refinement_prompt": "Darker"},
        )

        fetched = client.get(f"/api/images/{original['id']}").json()
        assert fetched["prompt"] == original["prompt"]
        assert fetched["image_data"] == original["image_data"]
        assert fetched["parent_image_id"] is None

    def test_unknown_image_returns_404(self, client):
        response = client.post(
            "/api/images/refine", json={"image_id": "missing", "refinement_prompt": "Darker"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Original image not found"


class TestGetImage:
    """Tests for GET /api/images/{image_id} and GET /api/images."""

    def test_raw_format_returns_bytes(self, client):
        session_id = create_session(client)
        image = generate(client, session_id)

        response = client.get(f"/api/images/{image['id']}", params={"format": "image"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert response.content == base64.b64decode(image["image_data"])

    def test_unknown_image_returns_404(self, client):
        response = client.get("/api/images/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Image not found"

    def test_list_for_session(self, client):
        """Listing returns metadata only, for the requested session."""
        session_id = create_session(client)
        other_id = create_session(client, "Another idea")
        first = generate(client, session_id, "First")
        generate(client, other_id, "Elsewhere")

        response = client.get("/api/images", params={"session_id": session_id})

        assert response.status_code == 200
        listed = response.json()
        assert [i["id"] for i in listed] == [first["id"]]
        assert "image_data" not in listed[0]


class TestDeleteImage:
    """Tests for DELETE /api/images/{image_id}."""

    def test_delete(self, client):
        session_id = create_session(client)
        image = generate(client, session_id)

        response = client.delete(f"/api/images/{image['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"/api/images/{image['id']}").status_code == 404

    def test_delete_source_keeps_refinement(self, client):
        session_id = create_session(client)
        original = generate(client, session_id)
        refined = client.post(
            "/api/images/refine",
            json={"image_id": original["id"], "refinement_prompt": "Darker"},
        ).json()

        client.delete(f"/api/images/{original['id']}")

        fetched = client.get(f"/api/images/{refined['id']}").json()
        assert fetched["parent_image_id"] is None

    def test_delete_unknown_returns_404(self, client):
        response = client.delete("/api/images/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Image not found"

    def test_session_delete_removes_images(self, client):
        session_id = create_session(client)
        image = generate(client, session_id)

        client.delete(f"/api/sessions/{session_id}")

        assert client.get(f"/api/images/{image['id']}").status_code == 404
