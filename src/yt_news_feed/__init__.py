"""
yt-news-feed: YouTube news feed scraper, enricher and web feed.

This package scrapes the categorized YouTube news feed, enriches each category
incrementally through the YouTube Data API with caption text, and serves the
aggregated dataset through a small web feed.
"""

__version__ = "0.1.0"
__author__ = "yt-news-feed"
__description__ = "YouTube news feed scraper, enricher and web feed"
