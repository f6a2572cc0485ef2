"""PodcastIndex.org API client"""

import time
import asyncio
import hashlib
import aiohttp
from typing import Optional, Dict, List

from .. import config
from ..exceptions import ConfigurationError, DirectorySearchError
from ..models import CandidateFeed
from ..utils.logging import get_logger

logger = get_logger(__name__)


class DirectoryAuthSigner:
    """Builds the time-based auth headers PodcastIndex requires on every request"""

    def __init__(self, api_key: Optional[str] = None, api_secret: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.PODCASTINDEX_API_KEY
        self.api_secret = api_secret if api_secret is not None else config.PODCASTINDEX_API_SECRET

    def build_auth_headers(self) -> Dict[str, str]:
        """Generate auth headers for PodcastIndex

        The signature is the hex SHA-1 of key + secret + unix time, so the
        headers must be rebuilt for each request.
        """
        if not self.api_key or not self.api_secret:
            raise ConfigurationError(
                "PodcastIndex API key/secret missing. Set PODCASTINDEX_API_KEY and PODCASTINDEX_API_SECRET"
            )

        api_header_time = str(int(time.time()))
        hash_input = self.api_key + self.api_secret + api_header_time
        sha1_hash = hashlib.sha1(hash_input.encode()).hexdigest()

        return {
            "X-Auth-Key": self.api_key,
            "X-Auth-Date": api_header_time,
            "Authorization": sha1_hash,
        }


class PodcastIndexClient:
    """Client for PodcastIndex.org - the primary directory"""

    def __init__(self, signer: Optional[DirectoryAuthSigner] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.signer = signer or DirectoryAuthSigner()
        self.base_url = (base_url or config.PODCASTINDEX_BASE_URL).rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT)

    async def search_by_title(self, title: str) -> List[CandidateFeed]:
        """Exact-title search (/search/bytitle)"""
        return await self._search("bytitle", title)

    async def search_by_term(self, term: str) -> List[CandidateFeed]:
        """Fuzzy term search (/search/byterm)"""
        return await self._search("byterm", term)

    async def _search(self, endpoint: str, query: str) -> List[CandidateFeed]:
        headers = self.signer.build_auth_headers()
        headers["User-Agent"] = config.USER_AGENT
        url = f"{self.base_url}/search/{endpoint}"

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, headers=headers, params={"q": query}) as resp:
                    if resp.status != 200:
                        body = await resp.text()
                        logger.error(f"PodcastIndex {endpoint} error response ({resp.status}): {body[:200]}")
                        raise DirectorySearchError(
                            f"PodcastIndex search failed with status {resp.status}", status=resp.status
                        )
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError:
                        logger.warning(f"PodcastIndex {endpoint} returned a non-JSON body")
                        data = None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DirectorySearchError(f"PodcastIndex {endpoint} request failed: {e}") from e

        feeds = self._usable_feeds(data)
        logger.debug(f"PodcastIndex {endpoint} '{query}': {len(feeds)} usable feeds")
        return feeds

    @staticmethod
    def _usable_feeds(data) -> List[CandidateFeed]:
        """A response without a ``feeds`` list counts as no results"""
        feeds = data.get("feeds") if isinstance(data, dict) else None
        if not isinstance(feeds, list):
            return []

        candidates = []
        for feed in feeds:
            if isinstance(feed, dict) and feed.get("url"):
                candidates.append(CandidateFeed.from_podcast_index(feed))
        return candidates
