"""
Processed-video tracking for incremental enrichment.

The tracker file records every video ID that has been enriched, with the
time it was enriched, so later runs skip it:

    {"processedVideos": {"<videoId>": "<ISO-8601 timestamp>"}}

Entries are never pruned. There is no locking; the file assumes a single
writer process.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PROCESSED_KEY = 'processedVideos'


class ProcessedVideoTracker:
    """Loads and saves the set of enriched video IDs."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.processed: Dict[str, str] = {}

    def load(self) -> Dict[str, str]:
        """
        Load the processed-video mapping from disk.

        A missing or unreadable file yields an empty mapping; this never raises.

        Returns:
            Mapping of video ID -> ISO-8601 timestamp
        """
        processed: Dict[str, str] = {}
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding='utf-8'))
                entries = data.get(PROCESSED_KEY, {})
                if not isinstance(entries, dict):
                    raise ValueError(f"'{PROCESSED_KEY}' is not an object")
                processed = {str(k): str(v) for k, v in entries.items()}
            except Exception as e:
                logger.warning(f"Could not load processed videos from {self.path}, starting fresh: {e}")
                processed = {}

        self.processed = processed
        logger.debug(f"Loaded {len(processed)} processed video entries")
        return dict(processed)

    def save(self, processed: Optional[Dict[str, str]] = None) -> None:
        """
        Rewrite the tracker file with the given mapping.

        The file is written to a temporary sibling and moved into place, so
        readers see either the old or the new content. Errors propagate.

        Args:
            processed: Mapping to persist (defaults to the in-memory mapping)
        """
        if processed is not None:
            self.processed = dict(processed)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps({PROCESSED_KEY: self.processed}, indent=2)

        fd, tmp_name = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp_file:
                tmp_file.write(content)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def is_processed(self, video_id: str) -> bool:
        return video_id in self.processed

    def mark_processed(self, video_id: str, when: Optional[datetime] = None) -> str:
        """
        Record a video as enriched and persist the tracker immediately.

        Returns:
            The ISO-8601 timestamp recorded
        """
        timestamp = (when or datetime.now(timezone.utc)).isoformat()
        self.processed[video_id] = timestamp
        self.save()
        return timestamp

    def __len__(self) -> int:
        return len(self.processed)

    def __contains__(self, video_id: str) -> bool:
        return self.is_processed(video_id)
