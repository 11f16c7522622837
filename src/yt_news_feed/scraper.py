"""
YouTube news feed scraper.

Reads the YouTube news destination page with a headless Playwright browser
and groups the videos under the news topics YouTube shows them in.

Usage:
    async with NewsScraper(config) as scraper:
        categories = await scraper.scrape()
"""

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import async_playwright, Browser, Page

from .config import Configuration
from .error_handling import RetryPolicy, ScrapeError, retry_async

logger = logging.getLogger(__name__)


# Reads every news section and its watch links; grouping happens in Python.
EXTRACT_SECTIONS_JS = """
() => {
    const sections = [];
    document.querySelectorAll('ytd-rich-section-renderer').forEach(section => {
        const title = section.querySelector('#title-text')?.textContent?.trim() || '';
        const videos = [];
        section.querySelectorAll('a#thumbnail[href*="watch"]').forEach(anchor => {
            const container = anchor.closest('ytd-rich-item-renderer, ytd-video-renderer');
            if (!container) return;
            videos.push({
                url: anchor.href,
                title: container.querySelector('#video-title')?.textContent?.trim() || '',
                channel: container.querySelector('#channel-name a, #text > a')?.textContent?.trim() || ''
            });
        });
        sections.push({title, videos});
    });
    return sections;
}
"""

CategorizedRaw = Dict[str, List[Dict[str, str]]]


def group_sections(sections: List[Dict[str, Any]]) -> CategorizedRaw:
    """
    Group raw page sections into categories.

    Sections without a title are ignored, videos without a URL or title are
    dropped, URLs are de-duplicated within a category, and categories that
    end up empty are removed. Sections sharing a title are merged.

    Raises:
        ScrapeError: If there are no sections or no videos at all
    """
    if not sections:
        raise ScrapeError("No news sections found on the page")

    categories: CategorizedRaw = {}
    seen_urls: Dict[str, set] = {}

    for section in sections:
        title = (section.get('title') or '').strip()
        if not title:
            continue

        videos = categories.setdefault(title, [])
        seen = seen_urls.setdefault(title, set())

        for video in section.get('videos') or []:
            url = video.get('url') or ''
            video_title = (video.get('title') or '').strip()
            if not url or not video_title or url in seen:
                continue
            seen.add(url)
            videos.append({
                'url': url,
                'title': video_title,
                'channel': (video.get('channel') or '').strip(),
            })

    categories = {name: videos for name, videos in categories.items() if videos}
    if not categories:
        raise ScrapeError("No videos found in any category")
    return categories


class NewsScraper:
    """Headless browser scraper for the YouTube news destination page."""

    VIEWPORT = {'width': 1920, 'height': 1080}
    CONTENT_WAIT_MS = 5000
    SCROLL_WAIT_MS = 2000

    def __init__(self, config: Configuration, retry_policy: Optional[RetryPolicy] = None):
        self.config = config
        self.retry_policy = retry_policy or config.get_scrape_retry_policy()
        self._playwright = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self):
        await self._launch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _launch(self) -> None:
        if self._browser is not None:
            return
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=['--no-sandbox', '--disable-setuid-sandbox', '--window-size=1920,1080'],
            )
        except Exception as e:
            await self.close()
            raise ScrapeError(f"Failed to launch browser: {e}") from e
        logger.info("Browser launched")

    async def close(self) -> None:
        """Release browser resources."""
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.error(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    async def scrape(self, url: Optional[str] = None) -> CategorizedRaw:
        """
        Scrape and categorize the news feed, retrying the whole page load on failure.

        Raises:
            ScrapeError: If every attempt fails
        """
        url = url or self.config.news_feed_url
        try:
            return await retry_async(self._scrape_once, url, policy=self.retry_policy)
        except Exception as e:
            raise ScrapeError(f"All {self.retry_policy.max_attempts} attempts failed. Last error: {e}") from e

    async def _scrape_once(self, url: str) -> CategorizedRaw:
        await self._launch()
        page: Page = await self._browser.new_page(viewport=self.VIEWPORT)
        try:
            logger.info(f"Navigating to: {url}")
            try:
                await page.goto(url, wait_until='domcontentloaded', timeout=self.config.navigation_timeout_ms)
            except Exception as e:
                raise ScrapeError(f"Failed to load page: {e}")

            try:
                await page.wait_for_selector('#content', timeout=self.config.navigation_timeout_ms)
                logger.info("Main content container found")
            except Exception:
                logger.warning("Timeout waiting for #content, continuing")

            await page.wait_for_timeout(self.CONTENT_WAIT_MS)

            logger.info("Scrolling to load more content...")
            for _ in range(self.config.scroll_iterations):
                await page.evaluate('window.scrollBy(0, window.innerHeight * 2)')
                await page.wait_for_timeout(self.SCROLL_WAIT_MS)
            await page.wait_for_timeout(self.SCROLL_WAIT_MS)

            sections = await page.evaluate(EXTRACT_SECTIONS_JS)
            categories = group_sections(sections)
            logger.info(f"Found {len(categories)} news categories")
            return categories
        finally:
            await page.close()
