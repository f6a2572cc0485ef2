"""Resolve podcast RSS feeds from Spotify show metadata"""

from .models import CandidateFeed, FeedResolution, MatchScore, ShowMetadata
from .resolver import FeedResolver

__all__ = ["CandidateFeed", "FeedResolution", "FeedResolver", "MatchScore", "ShowMetadata"]
