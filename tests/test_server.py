"""
Tests for the feed web server.
"""

import json

import pytest
from fastapi.testclient import TestClient

from src.yt_news_feed.config import Configuration
from src.yt_news_feed.server import create_app


@pytest.fixture
def static_dir(tmp_path):
    directory = tmp_path / "public"
    directory.mkdir()
    (directory / "index.html").write_text("<html><body>feed</body></html>", encoding="utf-8")
    (directory / "app.js").write_text("console.log('feed');", encoding="utf-8")
    return directory


def make_client(tmp_path, static_dir):
    config = Configuration(
        youtube_api_key=None,
        output_file=tmp_path / "enhanced.json",
        static_dir=static_dir,
    )
    return TestClient(create_app(config)), config


class TestVideosEndpoint:

    def test_returns_dataset(self, tmp_path, static_dir):
        client, config = make_client(tmp_path, static_dir)
        dataset = {"Top": [{"url": "https://www.youtube.com/watch?v=a1", "title": "One"}]}
        config.output_file.write_text(json.dumps(dataset), encoding="utf-8")

        response = client.get("/api/videos")

        assert response.status_code == 200
        assert response.json() == dataset

    def test_reads_file_on_every_request(self, tmp_path, static_dir):
        client, config = make_client(tmp_path, static_dir)
        config.output_file.write_text(json.dumps({"A": []}), encoding="utf-8")
        assert client.get("/api/videos").json() == {"A": []}

        config.output_file.write_text(json.dumps({"B": []}), encoding="utf-8")
        assert client.get("/api/videos").json() == {"B": []}

    def test_missing_file_returns_500(self, tmp_path, static_dir):
        client, _ = make_client(tmp_path, static_dir)

        response = client.get("/api/videos")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load video data"}

    def test_malformed_file_returns_500(self, tmp_path, static_dir):
        client, config = make_client(tmp_path, static_dir)
        config.output_file.write_text("{broken", encoding="utf-8")

        response = client.get("/api/videos")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to load video data"}


class TestStaticAssets:

    def test_index_page(self, tmp_path, static_dir):
        client, _ = make_client(tmp_path, static_dir)

        response = client.get("/")

        assert response.status_code == 200
        assert "feed" in response.text

    def test_static_file(self, tmp_path, static_dir):
        client, _ = make_client(tmp_path, static_dir)

        response = client.get("/app.js")

        assert response.status_code == 200
        assert "console.log" in response.text

    def test_missing_static_dir(self, tmp_path):
        client, _ = make_client(tmp_path, tmp_path / "nowhere")

        assert client.get("/").status_code == 404
        assert client.get("/api/videos").status_code == 500
