"""
Data models for the yt-news-feed system.

This module defines the video records produced by the scraping stage, the
enriched records produced by the enrichment pipeline, and the type aliases
for the categorized datasets that flow between the stages.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, parse_qs

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def extract_video_id(url: str) -> Optional[str]:
    """
    Derive a video ID from the ``v`` query parameter of a watch URL.

    Returns None when the URL is malformed or has no ``v`` parameter.
    """
    if not url:
        return None
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    values = parse_qs(parsed.query).get('v')
    if not values or not values[0].strip():
        return None
    return values[0].strip()


class VideoRecord(BaseModel):
    """
    A scraped news video before enrichment.

    Extra scraped fields are kept and written back out unchanged.
    """
    model_config = ConfigDict(extra="allow")

    url: str = Field(..., description="YouTube watch URL")
    title: str = Field(..., description="Video title")
    channel: str = Field(default="", description="Channel name")

    @field_validator('url', 'title')
    @classmethod
    def validate_non_empty_strings(cls, v):
        """Ensure url and title are not empty."""
        if not v or not v.strip():
            raise ValueError('Field cannot be empty')
        return v.strip()

    @property
    def video_id(self) -> Optional[str]:
        return extract_video_id(self.url)


class EnrichedVideo(VideoRecord):
    """
    A video record with statistics, details and captions from the Data API.

    Serialized with camelCase keys (``publishedAt``, ``hasCaptions``) to match
    the enhanced dataset file format.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    views: Optional[str] = Field(None, description="View count")
    likes: Optional[str] = Field(None, description="Like count")
    comments: Optional[str] = Field(None, description="Comment count")
    thumbnail: Optional[str] = Field(None, description="Thumbnail URL")
    duration: Optional[str] = Field(None, description="ISO-8601 duration")
    published_at: Optional[str] = Field(None, alias="publishedAt", description="Publish timestamp")
    description: str = Field(default="", description="Video description")
    has_captions: bool = Field(default=False, alias="hasCaptions", description="Whether captions are available")
    language: str = Field(default="unknown", description="Default or audio language code")
    captions: Optional[str] = Field(None, description="Caption text")

    @field_validator('views', 'likes', 'comments', mode='before')
    @classmethod
    def coerce_counts(cls, v):
        """Keep counts as strings, the way the Data API reports them."""
        if v is None:
            return None
        return str(v)

    @classmethod
    def from_details(cls, record: VideoRecord, details: Dict[str, Any], captions: Optional[str]) -> 'EnrichedVideo':
        """
        Merge a scraped record with a Data API video resource.

        Args:
            record: The scraped video record
            details: Video resource with snippet, statistics and contentDetails
            captions: Caption text, or None when unavailable

        Returns:
            EnrichedVideo with the original fields first
        """
        statistics = details.get('statistics', {})
        snippet = details.get('snippet', {})
        content_details = details.get('contentDetails', {})

        data = record.model_dump()
        data.update({
            'views': statistics.get('viewCount'),
            'likes': statistics.get('likeCount'),
            'comments': statistics.get('commentCount'),
            'thumbnail': _pick_thumbnail(snippet.get('thumbnails', {})),
            'duration': content_details.get('duration'),
            'publishedAt': snippet.get('publishedAt'),
            'description': snippet.get('description') or '',
            'hasCaptions': content_details.get('caption') == 'true',
            'language': snippet.get('defaultLanguage') or snippet.get('defaultAudioLanguage') or 'unknown',
            'captions': captions,
        })
        return cls.model_validate(data)

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, the scraped fields (extras included) first."""
        data = self.model_dump(by_alias=True)
        scraped_keys = list(VideoRecord.model_fields) + list(self.model_extra or {})
        ordered = {key: data[key] for key in scraped_keys}
        ordered.update((key, value) for key, value in data.items() if key not in ordered)
        return ordered


def _pick_thumbnail(thumbnails: Dict[str, Any]) -> Optional[str]:
    for size in ('high', 'medium', 'standard', 'maxres', 'default'):
        if size in thumbnails and thumbnails[size].get('url'):
            return thumbnails[size]['url']
    return None


# category name -> ordered videos
CategorizedVideos = Dict[str, List[VideoRecord]]
EnhancedDataset = Dict[str, List[EnrichedVideo]]


def parse_categorized_videos(data: Dict[str, Any]) -> CategorizedVideos:
    """
    Build VideoRecord lists from raw scraped JSON, preserving category order.

    Entries that are not valid records are dropped.
    """
    categorized: CategorizedVideos = {}
    for category, videos in data.items():
        records = []
        for index, video in enumerate(videos or []):
            try:
                records.append(VideoRecord.model_validate(video))
            except ValueError as e:
                logger.warning(f"Skipping invalid video in category '{category}' at index {index}: {e}")
        categorized[category] = records
    return categorized


def dataset_to_json(dataset: EnhancedDataset) -> Dict[str, List[Dict[str, Any]]]:
    return {category: [video.to_json_dict() for video in videos] for category, videos in dataset.items()}


def dataset_from_json(data: Dict[str, Any]) -> EnhancedDataset:
    return {
        category: [EnrichedVideo.model_validate(video) for video in videos]
        for category, videos in data.items()
    }
