"""
Tests for caption fetching.

The transcript API is mocked so no network calls are made.
"""

import pytest
from unittest.mock import Mock, patch

from youtube_transcript_api._errors import NoTranscriptFound, TranscriptsDisabled, VideoUnavailable

from src.yt_news_feed.caption_source import CaptionSource
from src.yt_news_feed.config import Configuration


@pytest.fixture
def config(monkeypatch):
    for var in ('PROXY_USERNAME', 'PROXY_PASSWORD', 'CAPTION_LANGUAGES'):
        monkeypatch.delenv(var, raising=False)
    return Configuration(youtube_api_key='test_key')


def make_transcript(segments, language_code='en'):
    transcript = Mock()
    transcript.language_code = language_code
    transcript.fetch.return_value.to_raw_data.return_value = segments
    return transcript


class TestCaptionSource:

    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_fetch_preferred_language(self, mock_api_class, config):
        transcript = make_transcript([
            {'text': 'Good evening', 'start': 0.0, 'duration': 1.0},
            {'text': '  ', 'start': 1.0, 'duration': 1.0},
            {'text': 'here is the news', 'start': 2.0, 'duration': 1.0},
        ])
        transcript_list = Mock()
        transcript_list.find_transcript.return_value = transcript
        mock_api_class.return_value.list.return_value = transcript_list

        source = CaptionSource(config)
        result = source.fetch_captions('abc123DEF45')

        assert result == 'Good evening here is the news'
        mock_api_class.return_value.list.assert_called_once_with('abc123DEF45')
        transcript_list.find_transcript.assert_called_once_with(['en', 'en-US', 'en-GB'])

    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_falls_back_to_any_transcript(self, mock_api_class, config):
        fallback = make_transcript([{'text': 'Bonjour'}], language_code='fr')
        transcript_list = Mock()
        transcript_list.find_transcript.side_effect = NoTranscriptFound('abc123DEF45', ['en'], transcript_list)
        transcript_list.__iter__ = Mock(return_value=iter([fallback]))
        mock_api_class.return_value.list.return_value = transcript_list

        assert CaptionSource(config).fetch_captions('abc123DEF45') == 'Bonjour'

    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_no_transcripts_at_all(self, mock_api_class, config):
        transcript_list = Mock()
        transcript_list.find_transcript.side_effect = NoTranscriptFound('abc123DEF45', ['en'], transcript_list)
        transcript_list.__iter__ = Mock(return_value=iter([]))
        mock_api_class.return_value.list.return_value = transcript_list

        assert CaptionSource(config).fetch_captions('abc123DEF45') is None

    @pytest.mark.parametrize("error", [
        TranscriptsDisabled('abc123DEF45'),
        VideoUnavailable('abc123DEF45'),
        RuntimeError('connection reset'),
    ])
    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_errors_return_none(self, mock_api_class, error, config):
        mock_api_class.return_value.list.side_effect = error

        assert CaptionSource(config).fetch_captions('abc123DEF45') is None

    @patch('src.yt_news_feed.caption_source.WebshareProxyConfig')
    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_proxy_configuration(self, mock_api_class, mock_proxy_class, config):
        config.proxy_username = 'user'
        config.proxy_password = 'secret'

        CaptionSource(config)

        mock_proxy_class.assert_called_once_with(proxy_username='user', proxy_password='secret')
        mock_api_class.assert_called_once_with(proxy_config=mock_proxy_class.return_value)

    @patch('src.yt_news_feed.caption_source.YouTubeTranscriptApi')
    def test_no_proxy_by_default(self, mock_api_class, config):
        CaptionSource(config)

        mock_api_class.assert_called_once_with()

    def test_join_segments_accepts_objects(self):
        segments = [Mock(text='first'), Mock(text='second')]

        assert CaptionSource._join_segments(segments) == 'first second'
