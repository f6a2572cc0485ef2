"""Rank directory candidates against a show's metadata"""

import asyncio
from typing import List, Optional

from .. import config
from ..models import CandidateFeed, MatchScore, ShowMetadata
from ..utils.logging import get_logger
from ..utils.text import similarity
from .episode_probe import EpisodeProbe, NEUTRAL_SCORE, default_probe

logger = get_logger(__name__)

# Weighted scoring. Title dominates; an exact publisher match is enough to
# break a near-tie between two similarly titled feeds.
TITLE_WEIGHT = config.RSS_MATCH_TITLE_WEIGHT
DESCRIPTION_WEIGHT = config.RSS_MATCH_DESCRIPTION_WEIGHT
PUBLISHER_BONUS = config.RSS_MATCH_PUBLISHER_BONUS

# Title similarity needed for a simple (name-only) match, and the score
# a weighted match needs to count as confident
CONFIDENCE_THRESHOLD = config.RSS_MATCH_THRESHOLD

# Episode probe adjustments, applied to the top candidates only
PROBE_TOP_N = 3
PROBE_MATCH_THRESHOLD = 0.9
PROBE_MATCH_BOOST = 0.15
PROBE_MISMATCH_THRESHOLD = 0.2
PROBE_MISMATCH_PENALTY = 0.25


def _fold(text: Optional[str]) -> str:
    return (text or '').strip().lower()


class CandidateScorer:
    """Weighted title/description/publisher scoring with optional episode probe boost"""

    def __init__(self, probe: Optional[EpisodeProbe] = None):
        self.probe = probe or default_probe

    def select_best_feed(self, candidates: List[CandidateFeed], query: str) -> Optional[str]:
        """
        Name-only selection.

        Returns the first candidate whose title is at least
        CONFIDENCE_THRESHOLD similar to the query, else the first candidate.
        Directories rank by relevance, so the first result is the default.
        """
        if not candidates:
            return None

        folded_query = _fold(query)
        for candidate in candidates:
            if similarity(_fold(candidate.title), folded_query) >= CONFIDENCE_THRESHOLD:
                return candidate.url

        logger.debug(f"No candidate title matches '{query}' closely, using first result")
        return candidates[0].url

    async def select_best_feed_for_metadata(self, candidates: List[CandidateFeed],
                                            metadata: ShowMetadata) -> Optional[str]:
        best = self.pick_winner(await self.rank(candidates, metadata))
        return best.candidate.url if best else None

    def score_candidate(self, candidate: CandidateFeed, metadata: ShowMetadata) -> float:
        """Weighted similarity of one candidate, before any probe adjustment"""
        score = similarity(_fold(candidate.title), _fold(metadata.name)) * TITLE_WEIGHT

        if candidate.description and metadata.description:
            score += similarity(_fold(candidate.description), _fold(metadata.description)) * DESCRIPTION_WEIGHT

        if metadata.publisher and candidate.author and _fold(candidate.author) == _fold(metadata.publisher):
            score += PUBLISHER_BONUS

        return score

    async def rank(self, candidates: List[CandidateFeed], metadata: ShowMetadata) -> List[MatchScore]:
        """
        Score every candidate, probing the leaders when Spotify data is available.

        Returns the scores in the original candidate order.
        """
        scores = [MatchScore(candidate=c, score=self.score_candidate(c, metadata)) for c in candidates]

        if scores and metadata.can_probe:
            # sorted() is stable, so equal scores keep directory order
            leaders = sorted(scores, key=lambda s: s.score, reverse=True)[:PROBE_TOP_N]
            await asyncio.gather(*(self._apply_probe(s, metadata) for s in leaders))

        for s in scores:
            logger.debug(f"Candidate {s.candidate.url} ('{s.candidate.title}'): "
                         f"score={s.score:.3f} probe={s.probe_score}")
        return scores

    async def _apply_probe(self, match: MatchScore, metadata: ShowMetadata) -> None:
        try:
            probe_score = await self.probe.verify_latest_episode_match(
                metadata.spotify_show_id, match.candidate.url, metadata.access_token
            )
        except Exception as e:
            logger.warning(f"Episode probe failed for {match.candidate.url}: {e}")
            probe_score = NEUTRAL_SCORE

        match.probe_score = probe_score
        if probe_score >= PROBE_MATCH_THRESHOLD:
            match.score += PROBE_MATCH_BOOST
        elif probe_score <= PROBE_MISMATCH_THRESHOLD:
            match.score -= PROBE_MISMATCH_PENALTY

    @staticmethod
    def pick_winner(scores: List[MatchScore]) -> Optional[MatchScore]:
        """Highest score wins; the earliest candidate wins ties"""
        best = None
        for s in scores:
            if best is None or s.score > best.score:
                best = s
        return best
