"""Resolve a podcast's canonical RSS feed from its Spotify metadata"""

import uuid
from typing import Optional

from .fetchers.directory_search import DirectorySearchClient
from .fetchers.spotify import SpotifyClient
from .models import FeedResolution, ShowMetadata
from .processing.candidate_scorer import CandidateScorer, CONFIDENCE_THRESHOLD
from .utils.logging import get_logger

logger = get_logger(__name__)


class FeedResolver:
    """
    Directory search -> candidate scoring (with episode probe) -> feed URL.

    ``search_by_title`` and ``search_by_metadata`` return a URL or None.
    ``resolve`` returns the same answer with the score behind it, for
    callers that want to flag low-confidence matches for review.
    """

    def __init__(self, search_client: Optional[DirectorySearchClient] = None,
                 scorer: Optional[CandidateScorer] = None,
                 spotify: Optional[SpotifyClient] = None):
        self.search_client = search_client or DirectorySearchClient()
        self.scorer = scorer or CandidateScorer()
        self.spotify = spotify or SpotifyClient()

    async def search_by_title(self, title: str) -> Optional[str]:
        """Resolve from a show name alone"""
        cid = str(uuid.uuid4())[:8]
        candidates = await self.search_client.search(title)
        feed_url = self.scorer.select_best_feed(candidates, title)
        logger.info(f"[{cid}] '{title}': {len(candidates)} candidates -> {feed_url}")
        return feed_url

    async def search_by_metadata(self, metadata: ShowMetadata) -> Optional[str]:
        """Resolve from full show metadata"""
        resolution = await self.resolve(metadata)
        return resolution.feed_url

    async def resolve(self, metadata: ShowMetadata) -> FeedResolution:
        cid = str(uuid.uuid4())[:8]
        candidates, source = await self.search_client.search_with_source(metadata.name)
        if not candidates:
            logger.info(f"[{cid}] No feed found for '{metadata.name}'")
            return FeedResolution(feed_url=None)

        scores = await self.scorer.rank(candidates, metadata)
        best = self.scorer.pick_winner(scores)
        resolution = FeedResolution(
            feed_url=best.candidate.url,
            score=best.score,
            confident=best.score >= CONFIDENCE_THRESHOLD,
            source=source,
            candidates_considered=len(candidates),
        )

        if resolution.confident:
            logger.info(f"[{cid}] '{metadata.name}' -> {resolution.feed_url} (score {best.score:.2f}, {source})")
        else:
            logger.warning(
                f"[{cid}] Low-confidence match for '{metadata.name}': {resolution.feed_url} "
                f"(score {best.score:.2f} < {CONFIDENCE_THRESHOLD}, {source})"
            )
        return resolution

    async def resolve_spotify_url(self, spotify_url: str) -> Optional[str]:
        """Look up the show on Spotify, then resolve by its metadata"""
        metadata = await self.spotify.get_show_metadata(spotify_url)
        return await self.search_by_metadata(metadata)
