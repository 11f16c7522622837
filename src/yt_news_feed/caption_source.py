"""
Caption fetching for the yt-news-feed system.

This module fetches video transcripts using the youtube-transcript-api library
and returns them as plain concatenated text. Every failure is logged and
reported as a None result so a missing caption never aborts enrichment.
"""

import logging
from typing import Any, Iterable, List, Optional

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api.proxies import WebshareProxyConfig
from youtube_transcript_api._errors import (
    TranscriptsDisabled,
    NoTranscriptFound,
    VideoUnavailable,
    YouTubeRequestFailed,
    CouldNotRetrieveTranscript
)

from .config import Configuration

logger = logging.getLogger(__name__)


class CaptionSource:
    """
    Fetches caption text for YouTube videos.

    Preferred languages are tried first (manually created transcripts win over
    generated ones), then whichever transcript the video has.
    """

    def __init__(self, config: Configuration):
        self.config = config
        self.preferred_languages = list(config.caption_languages)

        if config.proxy_username and config.proxy_password:
            self.youtube_api = YouTubeTranscriptApi(
                proxy_config=WebshareProxyConfig(
                    proxy_username=config.proxy_username,
                    proxy_password=config.proxy_password,
                )
            )
        else:
            self.youtube_api = YouTubeTranscriptApi()

    def fetch_captions(self, video_id: str) -> Optional[str]:
        """
        Fetch the caption text for a video.

        Args:
            video_id: YouTube video ID

        Returns:
            Transcript segments joined by single spaces, or None if unavailable
        """
        try:
            transcript_list = self.youtube_api.list(video_id)

            try:
                transcript = transcript_list.find_transcript(self.preferred_languages)
            except NoTranscriptFound:
                transcript = next(iter(transcript_list), None)
                if transcript is None:
                    logger.warning(f"No transcript found for video {video_id}")
                    return None
                logger.debug(f"Using {transcript.language_code} transcript for {video_id}")

            text = self._join_segments(transcript.fetch().to_raw_data())
            logger.info(f"Fetched captions for {video_id}: {len(text)} characters")
            return text

        except TranscriptsDisabled:
            logger.warning(f"Transcripts are disabled for video {video_id}")
            return None
        except VideoUnavailable:
            logger.warning(f"Video {video_id} is unavailable")
            return None
        except YouTubeRequestFailed:
            logger.error(f"YouTube request failed when fetching captions for {video_id}")
            return None
        except CouldNotRetrieveTranscript:
            logger.warning(f"Could not retrieve captions for video {video_id}")
            return None
        except Exception as e:
            logger.error(f"Error fetching captions for video {video_id}: {e}")
            return None

    @staticmethod
    def _join_segments(raw_transcript: Iterable[Any]) -> str:
        text_segments: List[str] = []
        for segment in raw_transcript or []:
            text = segment.get('text', '') if isinstance(segment, dict) else getattr(segment, 'text', '')
            text = (text or '').strip()
            if text:
                text_segments.append(text)
        return ' '.join(text_segments)
