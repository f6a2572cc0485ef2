"""Read just enough of an RSS feed to know its latest episode"""

import io
import asyncio
import aiohttp
import feedparser
from typing import Optional

from .. import config
from ..models import RssEpisode
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Only the head of the feed is needed for the first <item>
RSS_RANGE_BYTES = 25000


class RssFeedReader:
    """Fetch a feed and extract its first item. Never raises."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT)

    async def fetch_latest_item(self, feed_url: str) -> Optional[RssEpisode]:
        body = await self._fetch(feed_url)
        if body is None:
            return None
        return self.parse_latest_item(body)

    async def _fetch(self, feed_url: str) -> Optional[bytes]:
        headers = {
            'Range': f'bytes=0-{RSS_RANGE_BYTES}',
            'User-Agent': config.RSS_USER_AGENT
        }
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(feed_url, headers=headers) as response:
                    # 206 Partial Content is the expected answer to the Range header
                    if not (200 <= response.status < 300):
                        logger.warning(f"[EpisodeProbe] RSS fetch error: {response.status} for {feed_url}")
                        return None
                    return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"[EpisodeProbe] Error fetching RSS feed {feed_url}: {e}")
            return None

    @staticmethod
    def parse_latest_item(body: bytes) -> Optional[RssEpisode]:
        """First entry of the feed, or None when nothing parseable is there

        A feed cut off by the Range request is still usable as long as the
        first item made it through.
        """
        # Wrapped in a stream so feedparser never treats the body as a path or URL
        feed = feedparser.parse(io.BytesIO(body))
        if not feed.entries:
            if feed.bozo:
                logger.warning(f"[EpisodeProbe] RSS parse error: {feed.get('bozo_exception')}")
            return None

        entry = feed.entries[0]
        title = entry.get('title')
        if title is None:
            return None
        return RssEpisode(title=title, pub_date=entry.get('published') or entry.get('updated'))
