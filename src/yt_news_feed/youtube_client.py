"""
YouTube Data API client wrapper for yt-news-feed.

This module wraps the YouTube Data API v3 ``videos.list`` call used to enrich
scraped news videos with statistics, snippet and content details. It adds
request pacing, quota accounting and a fixed-delay retry policy.
"""

import time
import logging
from typing import Any, Dict, Optional, Tuple

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google.auth.exceptions import GoogleAuthError

from .config import Configuration
from .error_handling import NewsFeedError, RetryPolicy, handle_fetch_errors, retry_call


logger = logging.getLogger(__name__)


class YouTubeAPIError(NewsFeedError):
    """Base exception for YouTube API related errors."""
    pass


class RateLimitError(YouTubeAPIError):
    """Raised when API rate limit or quota is exceeded."""
    pass


class AuthenticationError(YouTubeAPIError):
    """Raised when API authentication fails."""
    pass


class YouTubeClient:
    """
    YouTube Data API v3 client for per-video metadata lookups.

    The API key is required up front; a missing key raises
    MissingCredentialError before any request is made.
    """

    VIDEO_PARTS = 'snippet,statistics,contentDetails'

    # API quota cost of one videos.list request
    VIDEOS_QUOTA_COST = 1
    DEFAULT_QUOTA_LIMIT = 10000  # Daily quota limit
    REQUESTS_PER_SECOND = 10

    # Failures worth another attempt; everything else is raised at once
    TRANSIENT_ERRORS = (HttpError, OSError)

    def __init__(self, config: Configuration, retry_policy: Optional[RetryPolicy] = None):
        """
        Initialize YouTube client with configuration.

        Args:
            config: Configuration instance with API key
            retry_policy: Retry policy for transient API errors

        Raises:
            MissingCredentialError: If no API key is configured
            AuthenticationError: If the API client rejects the key
            YouTubeAPIError: If client initialization fails
        """
        self.config = config
        self.api_key = config.require_youtube_api_key()
        self.retry_policy = retry_policy or RetryPolicy(max_attempts=3, delay=1.0)
        self.quota_used = 0
        self.quota_limit = self.DEFAULT_QUOTA_LIMIT
        self.last_request_time = 0.0

        try:
            self.youtube = build('youtube', 'v3', developerKey=self.api_key, cache_discovery=False)
            logger.info("YouTube API client initialized successfully")
        except GoogleAuthError as e:
            raise AuthenticationError(f"YouTube API authentication failed: {e}")
        except Exception as e:
            raise YouTubeAPIError(f"Failed to initialize YouTube client: {e}")

    def _enforce_rate_limit(self) -> None:
        """Enforce a minimum interval between API requests."""
        current_time = time.time()
        time_since_last_request = current_time - self.last_request_time
        min_interval = 1.0 / self.REQUESTS_PER_SECOND

        if time_since_last_request < min_interval:
            sleep_time = min_interval - time_since_last_request
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f} seconds")
            time.sleep(sleep_time)

        self.last_request_time = time.time()

    def _check_quota(self) -> None:
        if self.quota_used + self.VIDEOS_QUOTA_COST > self.quota_limit:
            raise RateLimitError(
                f"Quota limit would be exceeded. Used: {self.quota_used}, Limit: {self.quota_limit}"
            )

    def _request_once(self, request_factory) -> Dict[str, Any]:
        """
        Execute one API request, classifying HTTP errors.

        Quota, credential and other 4xx errors are raised as YouTubeAPIError
        subclasses; 5xx and 429 responses are re-raised as HttpError so the
        caller can retry them.

        Raises:
            RateLimitError: If quota is exceeded
            AuthenticationError: If the key is rejected
            YouTubeAPIError: On a non-retryable client error
            HttpError, OSError: On a transient failure
        """
        self._enforce_rate_limit()
        try:
            return request_factory().execute()
        except HttpError as e:
            error_code = e.resp.status
            error_reason = e.error_details[0].get('reason', '') if e.error_details else ''

            logger.warning(f"HTTP error {error_code}: {error_reason}")

            if error_code == 403:
                if 'quotaExceeded' in error_reason or 'dailyLimitExceeded' in error_reason:
                    raise RateLimitError(f"YouTube API quota exceeded: {error_reason}")
                if 'keyInvalid' in error_reason or 'keyExpired' in error_reason:
                    raise AuthenticationError(f"YouTube API key invalid: {error_reason}")
            elif error_code == 401:
                raise AuthenticationError(f"YouTube API authentication failed: {error_reason}")

            if 400 <= error_code < 500 and error_code != 429:
                raise YouTubeAPIError(f"Client error {error_code}: {error_reason}")
            raise

    def _execute_with_retry(self, request_factory) -> Dict[str, Any]:
        """
        Execute an API request, retrying transient failures per the retry policy.

        Raises:
            RateLimitError, AuthenticationError: Immediately, without retry
            YouTubeAPIError: If the request fails on every attempt
        """
        try:
            return retry_call(
                self._request_once,
                request_factory,
                policy=self.retry_policy,
                exceptions=self.TRANSIENT_ERRORS,
                sleep=time.sleep,
            )
        except self.TRANSIENT_ERRORS as e:
            raise YouTubeAPIError(f"All retry attempts failed. Last error: {e}") from e

    def fetch_video_details(self, video_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch snippet, statistics and content details for one video.

        Args:
            video_id: YouTube video ID

        Returns:
            The video resource dict, or None when the API has no such video

        Raises:
            RateLimitError, AuthenticationError, YouTubeAPIError on API failure
        """
        self._check_quota()

        def _request():
            return self.youtube.videos().list(part=self.VIDEO_PARTS, id=video_id)

        response = self._execute_with_retry(_request)
        self.quota_used += self.VIDEOS_QUOTA_COST
        logger.debug(f"Quota updated: +{self.VIDEOS_QUOTA_COST}, total: {self.quota_used}/{self.quota_limit}")

        items = response.get('items', [])
        if not items:
            logger.warning(f"No data found for video ID: {video_id}")
            return None
        return items[0]

    @handle_fetch_errors("Video details fetch")
    def get_video_details(self, video_id: str) -> Optional[Dict[str, Any]]:
        """Like fetch_video_details, but any failure is logged and returned as None."""
        return self.fetch_video_details(video_id)

    def get_quota_usage(self) -> Tuple[int, int]:
        return self.quota_used, self.quota_limit
