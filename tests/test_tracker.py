"""
Tests for the processed-video tracker.
"""

import json
from datetime import datetime, timezone

from src.yt_news_feed.tracker import PROCESSED_KEY, ProcessedVideoTracker


class TestProcessedVideoTracker:

    def test_load_missing_file(self, tmp_path):
        tracker = ProcessedVideoTracker(tmp_path / "processed.json")

        assert tracker.load() == {}
        assert len(tracker) == 0

    def test_load_corrupt_file(self, tmp_path):
        path = tmp_path / "processed.json"
        path.write_text("{not json", encoding="utf-8")

        assert ProcessedVideoTracker(path).load() == {}

    def test_load_wrong_shape(self, tmp_path):
        path = tmp_path / "processed.json"
        path.write_text(json.dumps({PROCESSED_KEY: ["abc"]}), encoding="utf-8")

        assert ProcessedVideoTracker(path).load() == {}

    def test_load_existing(self, tmp_path):
        path = tmp_path / "processed.json"
        path.write_text(json.dumps({PROCESSED_KEY: {"abc": "2024-01-01T00:00:00+00:00"}}), encoding="utf-8")
        tracker = ProcessedVideoTracker(path)

        assert tracker.load() == {"abc": "2024-01-01T00:00:00+00:00"}
        assert "abc" in tracker
        assert tracker.is_processed("abc")
        assert not tracker.is_processed("xyz")

    def test_mark_processed_persists(self, tmp_path):
        path = tmp_path / "nested" / "processed.json"
        tracker = ProcessedVideoTracker(path)
        when = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

        timestamp = tracker.mark_processed("abc", when=when)

        assert timestamp == "2024-05-01T12:30:00+00:00"
        assert json.loads(path.read_text(encoding="utf-8")) == {PROCESSED_KEY: {"abc": timestamp}}
        assert ProcessedVideoTracker(path).load() == {"abc": timestamp}

    def test_mark_processed_uses_utc_now(self, tmp_path):
        tracker = ProcessedVideoTracker(tmp_path / "processed.json")

        timestamp = tracker.mark_processed("abc")

        assert datetime.fromisoformat(timestamp).tzinfo is not None

    def test_save_leaves_no_temp_files(self, tmp_path):
        tracker = ProcessedVideoTracker(tmp_path / "processed.json")
        tracker.save({"a": "t1", "b": "t2"})
        tracker.save()

        assert [p.name for p in tmp_path.iterdir()] == ["processed.json"]
        assert tracker.load() == {"a": "t1", "b": "t2"}
