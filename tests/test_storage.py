"""
Tests for dataset file storage.
"""

import json

import pytest

from src.yt_news_feed.error_handling import DatasetValidationError
from src.yt_news_feed.models import EnrichedVideo
from src.yt_news_feed.storage import (
    load_json_file, save_clean_captions, save_enhanced_data, save_scraped_data
)


def scraped(**overrides):
    video = {
        "url": "https://www.youtube.com/watch?v=abc123DEF45",
        "title": "Headline",
        "channel": "News Channel",
    }
    video.update(overrides)
    return video


class TestSaveScrapedData:

    def test_saves_valid_data(self, tmp_path):
        path = tmp_path / "videos.json"
        data = {"Top news": [scraped()], "Sport": [scraped(title="Match")]}

        save_scraped_data(data, path)

        assert json.loads(path.read_text(encoding="utf-8")) == data

    def test_keeps_non_ascii_titles(self, tmp_path):
        path = tmp_path / "videos.json"
        save_scraped_data({"World": [scraped(title="Café crème")]}, path)

        assert "Café crème" in path.read_text(encoding="utf-8")

    @pytest.mark.parametrize("data", [{}, None, ["not", "a", "mapping"]])
    def test_rejects_empty_or_non_mapping(self, tmp_path, data):
        with pytest.raises(DatasetValidationError, match="non-empty mapping"):
            save_scraped_data(data, tmp_path / "videos.json")

    def test_rejects_non_json_filename(self, tmp_path):
        with pytest.raises(DatasetValidationError, match=".json extension"):
            save_scraped_data({"Top": [scraped()]}, tmp_path / "videos.txt")

    def test_rejects_blank_category(self, tmp_path):
        with pytest.raises(DatasetValidationError, match="Invalid category name"):
            save_scraped_data({"  ": [scraped()]}, tmp_path / "videos.json")

    def test_rejects_non_list_videos(self, tmp_path):
        with pytest.raises(DatasetValidationError, match="must be a list"):
            save_scraped_data({"Top": scraped()}, tmp_path / "videos.json")

    def test_rejects_video_without_title(self, tmp_path):
        with pytest.raises(DatasetValidationError, match="at index 1"):
            save_scraped_data({"Top": [scraped(), scraped(title="")]}, tmp_path / "videos.json")

    def test_rejects_non_watch_url(self, tmp_path):
        path = tmp_path / "videos.json"
        with pytest.raises(DatasetValidationError, match="Invalid YouTube URL"):
            save_scraped_data({"Top": [scraped(url="https://example.com/watch?v=x")]}, path)
        assert not path.exists()


class TestEnhancedData:

    def test_save_enhanced_data_uses_json_keys(self, tmp_path):
        path = tmp_path / "out" / "enhanced.json"
        video = EnrichedVideo(
            url="https://www.youtube.com/watch?v=abc123DEF45",
            title="Headline",
            publishedAt="2024-01-01T00:00:00Z",
            hasCaptions=True,
            captions="text",
        )

        save_enhanced_data({"Top": [video]}, path)
        data = load_json_file(path)

        assert data["Top"][0]["publishedAt"] == "2024-01-01T00:00:00Z"
        assert data["Top"][0]["hasCaptions"] is True
        assert data["Top"][0]["language"] == "unknown"

    def test_load_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json_file(tmp_path / "missing.json")

    def test_load_malformed_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_json_file(path)


def test_save_clean_captions(tmp_path):
    path = tmp_path / "captions.json"

    save_clean_captions({"Top": {"Headline": "text"}}, path)

    assert load_json_file(path) == {"Top": {"Headline": "text"}}
