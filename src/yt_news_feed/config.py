"""
Configuration management for yt-news-feed.

This module provides configuration with environment variable handling,
validation, and default values for the scraping, enrichment and serving stages.
"""

import os
from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict
from dotenv import load_dotenv

from .error_handling import MissingCredentialError, RetryPolicy


NEWS_FEED_URLS = {
    'general': 'https://www.youtube.com/feed/news_destination',
    'business': 'https://www.youtube.com/feed/news_destination/business',
}

_PLACEHOLDER_API_KEY = "your_youtube_api_key_here"


class Configuration(BaseModel):
    """
    Configuration class for the yt-news-feed system.

    Handles the API credential, enrichment batch settings, file locations,
    scraper behaviour and server settings with environment variable support
    and validation.
    """

    # API Configuration
    youtube_api_key: Optional[str] = Field(default=None, description="YouTube Data API v3 key")

    # Enrichment Settings
    batch_size: int = Field(default=5, ge=1, le=50, description="Maximum videos enriched per category per run")
    item_delay_ms: int = Field(default=2000, ge=0, description="Delay after each enriched video in milliseconds")
    caption_languages: List[str] = Field(
        default=["en", "en-US", "en-GB"],
        description="Preferred caption languages, in order"
    )

    # Storage Configuration
    input_file: Path = Field(default=Path("youtube_news_videos.json"), description="Scraped categorized videos")
    output_file: Path = Field(default=Path("enhanced_youtube_news_videos.json"), description="Enhanced dataset")
    processed_file: Path = Field(default=Path("processed_videos.json"), description="Processed video tracker")
    captions_file: Path = Field(default=Path("cleaned_captions.json"), description="Cleaned captions output")

    # Scraper Settings
    news_feed: str = Field(default="general", description="News feed to scrape (general or business)")
    headless: bool = Field(default=True, description="Run the browser headless")
    scroll_iterations: int = Field(default=3, ge=0, le=20, description="Scrolls performed to load more content")
    scrape_max_attempts: int = Field(default=3, ge=1, le=10, description="Scrape attempts before giving up")
    scrape_retry_delay_ms: int = Field(default=5000, ge=0, description="Delay between scrape attempts in milliseconds")
    navigation_timeout_ms: int = Field(default=60000, ge=1000, description="Page navigation timeout in milliseconds")

    # Server Settings
    static_dir: Path = Field(default=Path("public"), description="Directory of static UI assets")
    host: str = Field(default="127.0.0.1", description="Feed server bind address")
    port: int = Field(default=3001, ge=1, le=65535, description="Feed server port")

    # Proxy Configuration
    proxy_username: Optional[str] = Field(default=None, description="Proxy username for caption fetching")
    proxy_password: Optional[str] = Field(default=None, description="Proxy password for caption fetching")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    model_config = ConfigDict(validate_assignment=True)

    @field_validator('youtube_api_key')
    @classmethod
    def validate_youtube_api_key(cls, v):
        """Treat blank and placeholder keys as missing."""
        if v is None:
            return None
        v = v.strip()
        if not v or v == _PLACEHOLDER_API_KEY:
            return None
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @field_validator('news_feed')
    @classmethod
    def validate_news_feed(cls, v):
        """Validate the news feed is a known destination."""
        v = v.lower().strip()
        if v not in NEWS_FEED_URLS:
            raise ValueError(f"News feed must be one of: {', '.join(NEWS_FEED_URLS)}")
        return v

    @field_validator('caption_languages')
    @classmethod
    def validate_caption_languages(cls, v):
        cleaned = [lang.strip() for lang in v if lang.strip()]
        if not cleaned:
            raise ValueError("At least one caption language must be provided")
        return cleaned

    def __init__(self, **data):
        """Initialize configuration, letting environment variables override defaults."""
        env_data = self._load_from_environment()
        env_data.update(data)
        super().__init__(**env_data)

    @staticmethod
    def _load_from_environment() -> dict:
        """Load configuration values from environment variables."""
        env_mapping = {
            'youtube_api_key': 'YOUTUBE_API_KEY',
            'batch_size': 'BATCH_SIZE',
            'item_delay_ms': 'ITEM_DELAY_MS',
            'caption_languages': 'CAPTION_LANGUAGES',
            'input_file': 'INPUT_FILE',
            'output_file': 'OUTPUT_FILE',
            'processed_file': 'PROCESSED_FILE',
            'captions_file': 'CAPTIONS_FILE',
            'news_feed': 'NEWS_FEED',
            'headless': 'HEADLESS',
            'scroll_iterations': 'SCROLL_ITERATIONS',
            'scrape_max_attempts': 'SCRAPE_MAX_ATTEMPTS',
            'scrape_retry_delay_ms': 'SCRAPE_RETRY_DELAY_MS',
            'navigation_timeout_ms': 'NAVIGATION_TIMEOUT_MS',
            'static_dir': 'STATIC_DIR',
            'host': 'HOST',
            'port': 'PORT',
            'proxy_username': 'PROXY_USERNAME',
            'proxy_password': 'PROXY_PASSWORD',
            'log_level': 'LOG_LEVEL',
            'log_file': 'LOG_FILE',
        }
        int_fields = {
            'batch_size', 'item_delay_ms', 'scroll_iterations', 'scrape_max_attempts',
            'scrape_retry_delay_ms', 'navigation_timeout_ms', 'port',
        }
        path_fields = {'input_file', 'output_file', 'processed_file', 'captions_file', 'static_dir', 'log_file'}

        env_data = {}
        for field_name, env_var in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue
            if field_name in int_fields:
                try:
                    env_data[field_name] = int(env_value)
                except ValueError:
                    raise ValueError(f"Environment variable {env_var} must be an integer")
            elif field_name == 'headless':
                env_data[field_name] = env_value.lower() in ('true', '1', 'yes', 'on')
            elif field_name == 'caption_languages':
                env_data[field_name] = [lang.strip() for lang in env_value.split(',') if lang.strip()]
            elif field_name in path_fields:
                env_data[field_name] = Path(env_value)
            else:
                env_data[field_name] = env_value

        return env_data

    @classmethod
    def load_config(cls, config_file: Optional[Path] = None, **overrides) -> 'Configuration':
        """
        Load configuration from environment variables and an optional .env file.

        Args:
            config_file: Optional path to .env file to load
            **overrides: Explicit values that take precedence over the environment

        Returns:
            Configuration instance

        Raises:
            ValidationError: If configuration validation fails
            FileNotFoundError: If specified config file doesn't exist
        """
        if config_file and not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        if config_file:
            load_dotenv(config_file)
        else:
            load_dotenv()

        try:
            return cls(**overrides)
        except ValidationError as e:
            raise e

    def require_youtube_api_key(self) -> str:
        """
        Return the YouTube API key.

        Raises:
            MissingCredentialError: If no key is configured
        """
        if not self.youtube_api_key:
            raise MissingCredentialError("YouTube API key not found. Set YOUTUBE_API_KEY in the environment or .env file")
        return self.youtube_api_key

    @property
    def news_feed_url(self) -> str:
        return NEWS_FEED_URLS[self.news_feed]

    @property
    def item_delay(self) -> float:
        """Inter-item delay in seconds."""
        return self.item_delay_ms / 1000.0

    def get_scrape_retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.scrape_max_attempts,
            delay=self.scrape_retry_delay_ms / 1000.0
        )

    def to_dict(self) -> dict:
        """
        Convert configuration to dictionary, excluding sensitive data.

        Returns:
            Dictionary representation of configuration (secrets masked)
        """
        config_dict = self.model_dump()
        for secret in ('youtube_api_key', 'proxy_password'):
            if config_dict.get(secret):
                config_dict[secret] = '***masked***'
        for key, value in config_dict.items():
            if isinstance(value, Path):
                config_dict[key] = str(value)
        return config_dict
