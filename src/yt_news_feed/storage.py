"""
JSON file storage for the scraped, enhanced and caption datasets.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

from .error_handling import DatasetValidationError
from .models import EnhancedDataset, dataset_to_json

logger = logging.getLogger(__name__)

WATCH_URL_PREFIX = 'https://www.youtube.com/watch?v='


def load_json_file(file_path: Path) -> Any:
    """
    Load JSON data from a file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
    """
    try:
        return json.loads(Path(file_path).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error loading JSON file {file_path}: {e}")
        raise


def write_json_file(data: Any, file_path: Path) -> Path:
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding='utf-8')
    return file_path


def save_enhanced_data(dataset: EnhancedDataset, output_path: Path) -> Path:
    """
    Write the enhanced dataset (category -> enriched videos) to disk.

    Errors propagate to the caller.
    """
    try:
        write_json_file(dataset_to_json(dataset), output_path)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Error saving enhanced data to {output_path}: {e}")
        raise
    logger.info(f"Enhanced data saved to: {output_path}")
    return Path(output_path)


def validate_scraped_data(data: Mapping[str, Any], filename: Path) -> None:
    """
    Validate a categorized video mapping before it is saved.

    Raises:
        DatasetValidationError: If the data or filename is invalid
    """
    if not data or not isinstance(data, Mapping):
        raise DatasetValidationError("Data must be a non-empty mapping of categories")

    if not str(filename) or Path(filename).suffix.lower() != '.json':
        raise DatasetValidationError("Filename must have .json extension")

    for category, videos in data.items():
        if not isinstance(category, str) or not category.strip():
            raise DatasetValidationError("Invalid category name found")

        if not isinstance(videos, list):
            raise DatasetValidationError(f'Videos for category "{category}" must be a list')

        for index, video in enumerate(videos):
            if not isinstance(video, Mapping) or not video.get('url') or not video.get('title'):
                raise DatasetValidationError(f'Invalid video data in category "{category}" at index {index}')
            if not str(video['url']).startswith(WATCH_URL_PREFIX):
                raise DatasetValidationError(f'Invalid YouTube URL in category "{category}" at index {index}')


def save_scraped_data(data: Mapping[str, Any], filename: Path) -> Path:
    """
    Validate and save scraped categorized videos, then verify the file re-parses.

    Raises:
        DatasetValidationError: If validation or verification fails
    """
    validate_scraped_data(data, filename)

    try:
        write_json_file(dict(data), filename)
    except OSError as e:
        raise DatasetValidationError(f"Failed to save JSON file: {e}")

    try:
        json.loads(Path(filename).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError):
        raise DatasetValidationError("Failed to verify saved JSON file")

    logger.info(f"Data saved to {filename}")
    return Path(filename)


def save_clean_captions(captions: Dict[str, Dict[str, str]], output_path: Path) -> Path:
    write_json_file(captions, output_path)
    logger.info(f"Cleaned captions saved to: {output_path}")
    return Path(output_path)
