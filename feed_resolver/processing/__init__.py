"""Candidate scoring and episode verification"""

from .candidate_scorer import CandidateScorer
from .episode_probe import (
    EpisodeProbe,
    ProbeCache,
    clear_all_probe_cache,
    clear_expired_probe_cache,
    get_probe_cache_stats,
    verify_latest_episode_match,
)

__all__ = [
    "CandidateScorer",
    "EpisodeProbe",
    "ProbeCache",
    "clear_all_probe_cache",
    "clear_expired_probe_cache",
    "get_probe_cache_stats",
    "verify_latest_episode_match",
]
