"""
Tests for the picture upload endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app


@pytest.fixture
def client(offline_config):
    return TestClient(create_app(offline_config))


class TestUploadEndpoint:
    """Test POST /api/upload."""

    def test_upload_and_serve(self, client, png_bytes, offline_config):
        response = client.post("/api/upload", files={"image": ("dog.png", png_bytes, "image/png")})

        assert response.status_code == 200
        body = response.json()
        assert body["url"] == f"/uploads/{body['filename']}"
        assert (offline_config.upload_dir / body["filename"]).exists()

        served = client.get(body["url"])
        assert served.status_code == 200
        assert served.content == png_bytes

    def test_wrong_extension(self, client):
        response = client.post("/api/upload", files={"image": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 400
        assert response.json() == {"error": "Only image files allowed"}

    def test_image_extension_with_non_image_bytes(self, client):
        response = client.post("/api/upload", files={"image": ("fake.png", b"hello", "image/png")})

        assert response.status_code == 400

    def test_missing_file(self, client, png_bytes):
        response = client.post("/api/upload", files={"other": ("dog.png", png_bytes, "image/png")})

        assert response.status_code == 400
        assert response.json() == {"error": "No image uploaded"}
