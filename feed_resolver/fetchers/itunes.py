"""iTunes Search API - secondary directory used when PodcastIndex has nothing"""

import asyncio
import aiohttp
from typing import Optional, List

from .. import config
from ..models import CandidateFeed
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ITunesSearchClient:
    """Public iTunes podcast search. Failures never propagate."""

    def __init__(self, search_url: Optional[str] = None, timeout: Optional[float] = None):
        self.search_url = search_url or config.ITUNES_SEARCH_URL
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT)

    async def search(self, term: str) -> List[CandidateFeed]:
        """Return at most one candidate built from the top iTunes result"""
        params = {"term": term, "media": "podcast", "limit": 1}

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(self.search_url, params=params) as resp:
                    if resp.status != 200:
                        logger.warning(f"iTunes search failed: {resp.status}")
                        return []
                    data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"iTunes search error: {e}")
            return []

        results = data.get("results") if isinstance(data, dict) else None
        if not results or not isinstance(results[0], dict) or not results[0].get("feedUrl"):
            return []

        candidate = CandidateFeed.from_itunes(results[0])
        logger.info(f"Found feed via iTunes: {candidate.title or term}")
        return [candidate]
