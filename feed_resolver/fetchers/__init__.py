"""Directory, Spotify and RSS access"""

from .directory_search import DirectorySearchClient
from .itunes import ITunesSearchClient
from .podcast_index import DirectoryAuthSigner, PodcastIndexClient
from .rss import RssFeedReader
from .spotify import SpotifyClient

__all__ = [
    "DirectoryAuthSigner",
    "DirectorySearchClient",
    "ITunesSearchClient",
    "PodcastIndexClient",
    "RssFeedReader",
    "SpotifyClient",
]
