"""Data models for the feed resolver"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ShowMetadata:
    """Identification of a show as known from Spotify"""
    name: str
    description: str = ""
    publisher: Optional[str] = None
    spotify_show_id: Optional[str] = None
    access_token: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("ShowMetadata.name is required")

    @property
    def can_probe(self) -> bool:
        """True when there is enough Spotify data to verify the latest episode"""
        return bool(self.spotify_show_id and self.access_token)


@dataclass(frozen=True)
class CandidateFeed:
    """One directory search result being considered as the show's feed"""
    title: str
    url: str
    description: Optional[str] = None
    author: Optional[str] = None

    @classmethod
    def from_podcast_index(cls, feed: dict) -> 'CandidateFeed':
        """Create from a PodcastIndex ``feeds`` entry"""
        return cls(
            title=feed.get('title') or '',
            url=feed.get('url') or '',
            description=feed.get('description'),
            author=feed.get('author') or feed.get('ownerName'),
        )

    @classmethod
    def from_itunes(cls, result: dict) -> 'CandidateFeed':
        """Create from an iTunes Search ``results`` entry"""
        return cls(
            title=result.get('trackName') or '',
            url=result.get('feedUrl') or '',
            author=result.get('artistName'),
        )


@dataclass
class MatchScore:
    """Weighted match score of one candidate for one resolution call"""
    candidate: CandidateFeed
    score: float
    probe_score: Optional[float] = None


@dataclass
class ProbeCacheEntry:
    """Cached episode probe result"""
    key: str
    score: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class SpotifyEpisode:
    """Latest episode of a show as reported by Spotify"""
    id: str
    name: str
    release_date: Optional[str] = None
    release_date_precision: str = "day"

    @classmethod
    def from_dict(cls, data: dict) -> 'SpotifyEpisode':
        return cls(
            id=data.get('id') or '',
            name=data.get('name') or '',
            release_date=data.get('release_date'),
            release_date_precision=data.get('release_date_precision') or 'day',
        )


@dataclass
class RssEpisode:
    """First <item> of an RSS feed"""
    title: str = ""
    pub_date: Optional[str] = None


@dataclass
class FeedResolution:
    """Outcome of a resolution, with the score behind it"""
    feed_url: Optional[str]
    score: float = 0.0
    confident: bool = False
    source: Optional[str] = None
    candidates_considered: int = 0

    @property
    def found(self) -> bool:
        return self.feed_url is not None

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'feed_url': self.feed_url,
            'score': self.score,
            'confident': self.confident,
            'source': self.source,
            'candidates_considered': self.candidates_considered,
        }
