"""
Caption text normalization.

Caption text from the transcript provider arrives with HTML entities (often
double-encoded, e.g. ``&amp;#39;``) and ragged whitespace. This module turns it
into plain single-spaced text and extracts cleaned captions from an enhanced
dataset.
"""

import html
import logging
import re
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')


def decode_entities(text: str) -> str:
    """Decode HTML entities until the text no longer changes."""
    decoded = html.unescape(text)
    while decoded != text:
        text = decoded
        decoded = html.unescape(text)
    return decoded


def clean_caption(caption: str) -> str:
    """
    Clean caption text by decoding entities and collapsing whitespace.

    Applying this twice gives the same result as applying it once.

    Args:
        caption: Raw caption text

    Returns:
        Cleaned caption text
    """
    if not caption:
        return ""
    text = decode_entities(caption)
    return _WHITESPACE.sub(' ', text).strip()


def extract_clean_captions(enhanced: Mapping[str, Any]) -> Dict[str, Dict[str, str]]:
    """
    Extract cleaned captions per category, keyed by video title.

    Videos without captions are skipped and categories left without any
    captions are dropped.

    Args:
        enhanced: Enhanced dataset as loaded from JSON (category -> list of video dicts)

    Returns:
        Mapping of category -> {title: cleaned caption}
    """
    cleaned_captions: Dict[str, Dict[str, str]] = {}

    for category, videos in enhanced.items():
        category_captions = {}
        for video in videos:
            captions = video.get('captions')
            if captions:
                category_captions[video.get('title', '')] = clean_caption(captions)

        if category_captions:
            cleaned_captions[category] = category_captions
        else:
            logger.debug(f"No captions in category '{category}', dropping it")

    return cleaned_captions
