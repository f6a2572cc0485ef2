"""Shared test configuration and fixtures for feed resolver tests"""

import re
import sys
from pathlib import Path
from typing import Optional

import pytest
from aioresponses import aioresponses
from faker import Faker

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from feed_resolver.fetchers.directory_search import DirectorySearchClient
from feed_resolver.fetchers.itunes import ITunesSearchClient
from feed_resolver.fetchers.podcast_index import DirectoryAuthSigner, PodcastIndexClient
from feed_resolver.fetchers.rss import RssFeedReader
from feed_resolver.fetchers.spotify import SpotifyClient
from feed_resolver.models import CandidateFeed, ShowMetadata
from feed_resolver.processing.episode_probe import EpisodeProbe, ProbeCache, clear_all_probe_cache

# Initialize faker for test data generation
fake = Faker()


def pytest_configure(config):
    config.addinivalue_line('markers', 'unit: fast tests with no network')
    config.addinivalue_line('markers', 'integration: end-to-end resolution against mocked HTTP')

# ===== URL patterns =====

PODCASTINDEX_BYTITLE = re.compile(r'^https://api\.podcastindex\.org/api/1\.0/search/bytitle')
PODCASTINDEX_BYTERM = re.compile(r'^https://api\.podcastindex\.org/api/1\.0/search/byterm')
ITUNES_SEARCH = re.compile(r'^https://itunes\.apple\.com/search')
SPOTIFY_TOKEN = 'https://accounts.spotify.com/api/token'


def spotify_episodes_url(show_id: str):
    return re.compile(rf'^https://api\.spotify\.com/v1/shows/{re.escape(show_id)}/episodes')


def spotify_show_url(show_id: str):
    return re.compile(rf'^https://api\.spotify\.com/v1/shows/{re.escape(show_id)}(\?.*)?$')


def count_requests(mocked: aioresponses, prefix: str) -> int:
    """Number of requests made to URLs starting with prefix"""
    return sum(
        len(calls) for (method, url), calls in mocked.requests.items()
        if str(url).startswith(prefix)
    )


# ===== Configuration Fixtures =====

@pytest.fixture(autouse=True)
def podcastindex_credentials(monkeypatch):
    """Directory credentials are always present unless a test removes them"""
    monkeypatch.setattr('feed_resolver.config.PODCASTINDEX_API_KEY', 'test-key')
    monkeypatch.setattr('feed_resolver.config.PODCASTINDEX_API_SECRET', 'test-secret')
    monkeypatch.setattr('feed_resolver.config.SPOTIFY_CLIENT_ID', 'spotify-id')
    monkeypatch.setattr('feed_resolver.config.SPOTIFY_CLIENT_SECRET', 'spotify-secret')


@pytest.fixture(autouse=True)
def isolated_probe_cache():
    """The process-wide probe cache starts empty in every test"""
    clear_all_probe_cache()
    yield
    clear_all_probe_cache()


@pytest.fixture
def mock_http():
    """Intercept all aiohttp traffic"""
    with aioresponses() as mocked:
        yield mocked


# ===== Component Fixtures =====

@pytest.fixture
def signer():
    return DirectoryAuthSigner(api_key='test-key', api_secret='test-secret')


@pytest.fixture
def search_client(signer):
    return DirectorySearchClient(
        podcast_index=PodcastIndexClient(signer=signer),
        itunes=ITunesSearchClient(),
    )


@pytest.fixture
def probe_cache():
    return ProbeCache()


@pytest.fixture
def probe(probe_cache):
    """Episode probe with its own cache"""
    return EpisodeProbe(
        cache=probe_cache,
        spotify=SpotifyClient(client_id='spotify-id', client_secret='spotify-secret'),
        rss_reader=RssFeedReader(),
    )


# ===== Model Factories =====

def create_show_metadata(name: str = None, **kwargs) -> ShowMetadata:
    """Factory for creating test show metadata"""
    return ShowMetadata(
        name=name or fake.catch_phrase().lower(),
        description=kwargs.get('description', fake.paragraph()),
        publisher=kwargs.get('publisher', fake.company()),
        spotify_show_id=kwargs.get('spotify_show_id'),
        access_token=kwargs.get('access_token'),
    )


def create_candidate(title: str, url: Optional[str] = None, **kwargs) -> CandidateFeed:
    """Factory for creating candidate feeds"""
    return CandidateFeed(
        title=title,
        url=url or fake.url() + 'rss',
        description=kwargs.get('description'),
        author=kwargs.get('author'),
    )


def podcast_index_feed(title: str, url: str, description: str = '', author: str = '') -> dict:
    """A feed entry as PodcastIndex returns it"""
    return {
        'id': fake.random_int(1000, 999999),
        'title': title,
        'url': url,
        'description': description,
        'author': author,
        'ownerName': author,
    }


def make_rss(title: str = 'Test Episode', pub_date: str = 'Fri, 01 Dec 2023 10:00:00 GMT',
             channel_title: str = 'Test Podcast') -> str:
    """RSS document whose first item is the given episode"""
    return f'''<?xml version="1.0" encoding="UTF-8"?>
    <rss version="2.0">
        <channel>
            <title>{channel_title}</title>
            <item>
                <title>{title}</title>
                <pubDate>{pub_date}</pubDate>
                <enclosure url="https://example.com/audio.mp3" type="audio/mpeg"/>
                <guid>test-guid-123</guid>
            </item>
            <item>
                <title>An Older Episode</title>
                <pubDate>Mon, 20 Nov 2023 10:00:00 GMT</pubDate>
                <guid>test-guid-122</guid>
            </item>
        </channel>
    </rss>'''


def spotify_episodes_payload(name: str, release_date: str = '2023-12-01', precision: str = 'day') -> dict:
    return {
        'items': [{
            'id': 'episode-123',
            'name': name,
            'description': "Today's top stories",
            'release_date': release_date,
            'release_date_precision': precision,
        }]
    }
