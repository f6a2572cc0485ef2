"""Multi-source directory search: PodcastIndex by title, then by term, then iTunes"""

from typing import Optional, List, Tuple

from .podcast_index import PodcastIndexClient
from .itunes import ITunesSearchClient
from ..models import CandidateFeed
from ..utils.logging import get_logger

logger = get_logger(__name__)


class DirectorySearchClient:
    """
    Find candidate feeds for a show name.

    PodcastIndex failures raise ``DirectorySearchError``: a broken primary
    index invalidates the whole resolution. The iTunes fallback never
    raises. An empty list means "no match", not "unavailable".
    """

    def __init__(self, podcast_index: Optional[PodcastIndexClient] = None,
                 itunes: Optional[ITunesSearchClient] = None):
        self.podcast_index = podcast_index or PodcastIndexClient()
        self.itunes = itunes or ITunesSearchClient()

    async def search(self, term: str) -> List[CandidateFeed]:
        candidates, _ = await self.search_with_source(term)
        return candidates

    async def search_with_source(self, term: str) -> Tuple[List[CandidateFeed], Optional[str]]:
        """Search, also returning which source produced the candidates"""
        feeds = await self.podcast_index.search_by_title(term)
        if feeds:
            return feeds, "bytitle"

        logger.debug(f"No bytitle results for '{term}', falling back to byterm search")
        feeds = await self.podcast_index.search_by_term(term)
        if feeds:
            return feeds, "byterm"

        logger.debug(f"No PodcastIndex results for '{term}', falling back to iTunes")
        feeds = await self.itunes.search(term)
        if feeds:
            return feeds, "itunes"

        logger.info(f"No directory has a feed for '{term}'")
        return [], None
