"""
Category enrichment pipeline for the yt-news-feed system.

This module enriches scraped news videos one category at a time. For each
category it walks the videos in order, skips those already recorded by the
processed-video tracker, fetches metadata and captions for the rest, keeps
only videos that have captions, and stops after a fixed batch size. The
aggregation driver runs the pipeline for every category and writes the
merged enhanced dataset.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Tuple, Union

from .caption_source import CaptionSource
from .config import Configuration
from .error_handling import InvalidCategoryError, MissingCredentialError
from .models import CategorizedVideos, EnhancedDataset, EnrichedVideo, VideoRecord, parse_categorized_videos
from .storage import load_json_file, save_enhanced_data
from .tracker import ProcessedVideoTracker
from .youtube_client import YouTubeClient

logger = logging.getLogger(__name__)

CategorySelector = Union[int, str]


class MetadataSource(Protocol):
    def get_video_details(self, video_id: str) -> Optional[Dict[str, Any]]:
        ...


class CaptionProvider(Protocol):
    def fetch_captions(self, video_id: str) -> Optional[str]:
        ...


@dataclass
class PipelineContext:
    """
    Everything one enrichment run needs, passed explicitly to each stage.

    Attributes:
        config: Run configuration (batch size, delay, file paths)
        dataset: Scraped categorized videos, in category order
        tracker: Processed-video tracker
        metadata_source: Provides Data API video resources
        caption_source: Provides caption text
        sleep: Coroutine used for the inter-item delay
    """
    config: Configuration
    dataset: CategorizedVideos
    tracker: ProcessedVideoTracker
    metadata_source: MetadataSource
    caption_source: CaptionProvider
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep)

    @classmethod
    def from_config(cls, config: Configuration) -> 'PipelineContext':
        """
        Build a context from configuration: load the scraped dataset and
        create the API clients.

        Raises:
            MissingCredentialError: If no YouTube API key is configured
            FileNotFoundError, json.JSONDecodeError: If the input file is unusable
        """
        config.require_youtube_api_key()
        dataset = parse_categorized_videos(load_json_file(config.input_file))
        return cls(
            config=config,
            dataset=dataset,
            tracker=ProcessedVideoTracker(config.processed_file),
            metadata_source=YouTubeClient(config),
            caption_source=CaptionSource(config),
        )


def resolve_category(dataset: CategorizedVideos, selector: CategorySelector) -> str:
    """
    Resolve a category index or name to a category name.

    Raises:
        InvalidCategoryError: If the index is out of range or the name is unknown
    """
    categories = list(dataset.keys())

    if isinstance(selector, int) and not isinstance(selector, bool):
        if 0 <= selector < len(categories):
            return categories[selector]
        raise InvalidCategoryError(
            f"Invalid category index: {selector}. Available categories: {len(categories)}"
        )

    if isinstance(selector, str) and selector in dataset:
        return selector

    raise InvalidCategoryError(f"Unknown category: {selector!r}. Available categories: {len(categories)}")


def _fetch_captions_safely(caption_source: CaptionProvider, video_id: str) -> Optional[str]:
    try:
        return caption_source.fetch_captions(video_id)
    except Exception as e:
        logger.error(f"Error fetching captions for video {video_id}: {e}")
        return None


async def fetch_video(context: PipelineContext, video_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Fetch metadata and captions for one video concurrently.

    A failure of either fetch is isolated: it yields None for that half only.

    Returns:
        (video resource or None, caption text or None)
    """
    details, captions = await asyncio.gather(
        asyncio.to_thread(context.metadata_source.get_video_details, video_id),
        asyncio.to_thread(_fetch_captions_safely, context.caption_source, video_id),
        return_exceptions=True,
    )

    if isinstance(details, BaseException):
        logger.error(f"Failed to fetch details for video ID {video_id}: {details}")
        details = None
    if isinstance(captions, BaseException):
        captions = None

    return details, captions


async def enrich_video(context: PipelineContext, video: VideoRecord, video_id: str) -> Optional[EnrichedVideo]:
    """
    Fetch and merge enrichment data for one video.

    Returns:
        The enriched video, or None when there is no metadata or the video
        has no captions
    """
    details, captions = await fetch_video(context, video_id)

    if not details:
        return None

    if details.get('contentDetails', {}).get('caption') != 'true':
        logger.info(f"No captions available for video: {video.title}")
        return None

    return EnrichedVideo.from_details(video, details, captions)


async def process_category(context: PipelineContext, selector: CategorySelector = 0) -> EnhancedDataset:
    """
    Enrich up to ``batch_size`` unprocessed videos of one category.

    Videos already in the tracker are skipped and do not count toward the
    batch. Videos without metadata or captions are discarded and left
    unmarked, so a later run can try them again. Each enriched video is
    marked processed and the tracker saved before moving on.

    Args:
        context: Pipeline context
        selector: Category index or name

    Returns:
        {category: [enriched videos]}; the category is present even if empty

    Raises:
        MissingCredentialError: If no YouTube API key is configured
        InvalidCategoryError: If the selector does not resolve
        OSError: If the tracker cannot be saved
    """
    context.config.require_youtube_api_key()
    category = resolve_category(context.dataset, selector)
    videos = context.dataset[category]
    batch_size = context.config.batch_size

    logger.info(f"Processing category: {category}")
    logger.info(f"Number of videos to process: {len(videos)}")

    context.tracker.load()
    enriched_videos = []

    for video in videos:
        if len(enriched_videos) >= batch_size:
            break

        try:
            video_id = video.video_id
            if not video_id:
                logger.warning(f"Invalid video URL: {video.url}")
                continue

            if context.tracker.is_processed(video_id):
                logger.info(f"Skipping already processed video: {video.title}")
                continue

            logger.info(f"Fetching details for video: {video.title}")
            enriched = await enrich_video(context, video, video_id)
        except Exception as e:
            logger.error(f"Error processing video {video.title}: {e}")
            continue

        if enriched is None:
            continue

        enriched_videos.append(enriched)
        context.tracker.mark_processed(video_id)
        logger.info(f"Successfully enhanced video: {video.title}")

        await context.sleep(context.config.item_delay)

    logger.info(f"Enhanced {len(enriched_videos)} videos in category: {category}")
    return {category: enriched_videos}


async def run_enrichment(context: PipelineContext, save: bool = True) -> EnhancedDataset:
    """
    Run the category pipeline for every category in order and merge the results.

    A category that fails is logged and skipped. A missing credential or a
    tracker/dataset write failure aborts the run. The merged dataset is
    written once, after all categories.

    Args:
        context: Pipeline context
        save: Write the merged dataset to the configured output file

    Returns:
        Merged enhanced dataset
    """
    context.config.require_youtube_api_key()

    categories = list(context.dataset.keys())
    all_enhanced: EnhancedDataset = {}

    for index, category in enumerate(categories):
        logger.info(f"Processing category {index + 1} of {len(categories)}")
        try:
            fragment = await process_category(context, index)
        except (MissingCredentialError, OSError):
            raise
        except Exception as e:
            logger.error(f"Error processing category {category}: {e}")
            continue
        all_enhanced.update(fragment)

    if save:
        save_enhanced_data(all_enhanced, context.config.output_file)

    logger.info("Completed processing all categories")
    return all_enhanced
