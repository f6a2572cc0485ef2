"""Exceptions raised by the feed resolver"""

from typing import Optional


class FeedResolverError(Exception):
    """Base class for feed resolver errors"""


class ConfigurationError(FeedResolverError):
    """Required credentials or settings are missing. Not retryable."""


class DirectorySearchError(FeedResolverError):
    """The primary podcast directory failed to answer a search"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class SpotifyError(FeedResolverError):
    """Spotify show lookup or token exchange failed"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
