"""
Episode probe: cross-check a candidate feed against Spotify.

A feed is very likely the right one when its newest <item> is the same
episode Spotify lists as the show's newest. The probe compares the two
titles and release dates and returns a score in [0, 1], where 0.5 means
there was not enough information to decide.

Computed scores are memoised per (show, feed) pair for ``PROBE_CACHE_TTL_MS``.
Neutral results caused by upstream or parse failures are not cached, so the
next call retries them.
"""

import time
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from dateutil import parser as date_parser

from .. import config
from ..fetchers.rss import RssFeedReader
from ..fetchers.spotify import SpotifyClient
from ..models import ProbeCacheEntry, RssEpisode, SpotifyEpisode
from ..utils.logging import get_logger
from ..utils.text import normalize_title, sequence_similarity, similarity

logger = get_logger(__name__)

NEUTRAL_SCORE = 0.5
PROBE_CACHE_TTL_MS = int(config.PROBE_CACHE_TTL_MINUTES * 60 * 1000)

# Title score blends word overlap with character-level ratio
JACCARD_WEIGHT = 0.7
SEQUENCE_WEIGHT = 0.3

# Final blend; an exact title alone gives at least 0.8 + 0.2 * 0.5
TITLE_SCORE_WEIGHT = 0.8
DATE_SCORE_WEIGHT = 0.2

# Dates within a day score 1.0, decaying linearly to 0 at DATE_ZERO_HOURS
DATE_FULL_MATCH_HOURS = 24.0
DATE_ZERO_HOURS = 72.0


class ProbeCache:
    """TTL map of probe scores keyed by show id and feed URL"""

    def __init__(self, ttl_ms: int = PROBE_CACHE_TTL_MS, clock: Callable[[], float] = time.time):
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: Dict[str, ProbeCacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(show_id: str, feed_url: str) -> str:
        return f"{show_id}|{feed_url}"

    def get(self, key: str) -> Optional[float]:
        """Cached score, or None when missing or expired (expired entries are dropped)"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.score

    def put(self, key: str, score: float) -> None:
        expires_at = self._clock() + self.ttl_ms / 1000
        with self._lock:
            self._entries[key] = ProbeCacheEntry(key=key, score=score, expires_at=expires_at)

    def sweep(self) -> int:
        """Remove expired entries; returns how many were removed"""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, int]:
        now = self._clock()
        with self._lock:
            live = sum(1 for entry in self._entries.values() if not entry.is_expired(now))
        return {"size": live, "ttl_ms": self.ttl_ms}


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def title_score(spotify_title: str, rss_title: str) -> float:
    a = normalize_title(spotify_title)
    b = normalize_title(rss_title)
    return similarity(a, b) * JACCARD_WEIGHT + sequence_similarity(a, b) * SEQUENCE_WEIGHT


def date_score(episode: SpotifyEpisode, rss_episode: RssEpisode) -> float:
    """Closeness of the two release dates; neutral when either is unknown

    Spotify gives a calendar date (midnight UTC once parsed) while the feed
    carries an RFC 822 timestamp.
    """
    if episode.release_date_precision != "day":
        return NEUTRAL_SCORE

    spotify_date = _parse_date(episode.release_date)
    rss_date = _parse_date(rss_episode.pub_date)
    if spotify_date is None or rss_date is None:
        return NEUTRAL_SCORE

    hours = abs((spotify_date - rss_date).total_seconds()) / 3600
    if hours <= DATE_FULL_MATCH_HOURS:
        return 1.0
    if hours >= DATE_ZERO_HOURS:
        return 0.0
    return 1.0 - (hours - DATE_FULL_MATCH_HOURS) / (DATE_ZERO_HOURS - DATE_FULL_MATCH_HOURS)


class EpisodeProbe:
    """Verify a show/feed pairing by comparing their latest episodes"""

    def __init__(self, cache: Optional[ProbeCache] = None, spotify: Optional[SpotifyClient] = None,
                 rss_reader: Optional[RssFeedReader] = None):
        self.cache = cache if cache is not None else ProbeCache()
        self.spotify = spotify or SpotifyClient()
        self.rss_reader = rss_reader or RssFeedReader()

    async def verify_latest_episode_match(self, show_id: str, feed_url: str,
                                          access_token: Optional[str] = None) -> float:
        """
        Score how well the feed's newest item matches Spotify's newest episode.

        Returns:
            Score between 0 and 1; 0.5 when the comparison could not be made
        """
        if not access_token:
            # Nothing to compare against on the Spotify side
            rss_episode = await self.rss_reader.fetch_latest_item(feed_url)
            logger.debug(f"[EpisodeProbe] No access token for {show_id}; feed readable: {rss_episode is not None}")
            return NEUTRAL_SCORE

        cache_key = ProbeCache.make_key(show_id, feed_url)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"[EpisodeProbe] Cache hit {cache_key}: {cached:.3f}")
            return cached

        spotify_episode = await self.spotify.get_latest_episode(show_id, access_token)
        if spotify_episode is None:
            logger.debug(f"[EpisodeProbe] No Spotify episode for {show_id} - returning neutral score")
            return NEUTRAL_SCORE

        rss_episode = await self.rss_reader.fetch_latest_item(feed_url)
        if rss_episode is None:
            logger.debug(f"[EpisodeProbe] No RSS item for {feed_url} - returning neutral score")
            return NEUTRAL_SCORE

        t_score = title_score(spotify_episode.name, rss_episode.title)
        d_score = date_score(spotify_episode, rss_episode)
        final_score = t_score * TITLE_SCORE_WEIGHT + d_score * DATE_SCORE_WEIGHT

        logger.debug(
            f"[EpisodeProbe] {show_id} vs {feed_url}: "
            f"'{spotify_episode.name}' / '{rss_episode.title}' "
            f"title={t_score:.3f} date={d_score:.3f} final={final_score:.3f}"
        )

        self.cache.put(cache_key, final_score)
        return final_score

    def clear_expired(self) -> int:
        return self.cache.sweep()

    def clear_all(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()


# Process-wide probe shared by callers that don't construct their own
default_probe = EpisodeProbe()


async def verify_latest_episode_match(show_id: str, feed_url: str, access_token: Optional[str] = None) -> float:
    return await default_probe.verify_latest_episode_match(show_id, feed_url, access_token)


def clear_expired_probe_cache() -> int:
    return default_probe.clear_expired()


def clear_all_probe_cache() -> None:
    """Empty the process-wide probe cache (used for test isolation)"""
    default_probe.clear_all()


def get_probe_cache_stats() -> Dict[str, int]:
    return default_probe.cache_stats()
