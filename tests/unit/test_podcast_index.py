"""Unit tests for PodcastIndex auth and search"""

import hashlib
import time

import pytest

from feed_resolver.exceptions import ConfigurationError, DirectorySearchError
from feed_resolver.fetchers.podcast_index import DirectoryAuthSigner, PodcastIndexClient

from conftest import PODCASTINDEX_BYTERM, PODCASTINDEX_BYTITLE, podcast_index_feed


class TestDirectoryAuthSigner:

    @pytest.mark.unit
    def test_headers_are_signed(self, signer, monkeypatch):
        monkeypatch.setattr(time, 'time', lambda: 1700000000.75)

        headers = signer.build_auth_headers()

        expected = hashlib.sha1(b'test-keytest-secret1700000000').hexdigest()
        assert headers == {
            'X-Auth-Key': 'test-key',
            'X-Auth-Date': '1700000000',
            'Authorization': expected,
        }

    @pytest.mark.unit
    def test_headers_recomputed_per_call(self, signer, monkeypatch):
        now = iter([1700000000.0, 1700000005.0])
        monkeypatch.setattr(time, 'time', lambda: next(now))

        first = signer.build_auth_headers()
        second = signer.build_auth_headers()

        assert first['X-Auth-Date'] != second['X-Auth-Date']
        assert first['Authorization'] != second['Authorization']

    @pytest.mark.unit
    def test_reads_credentials_from_config(self):
        headers = DirectoryAuthSigner().build_auth_headers()
        assert headers['X-Auth-Key'] == 'test-key'

    @pytest.mark.unit
    @pytest.mark.parametrize("key,secret", [("", "secret"), ("key", ""), ("", "")])
    def test_missing_secrets_fail_fast(self, key, secret):
        with pytest.raises(ConfigurationError):
            DirectoryAuthSigner(api_key=key, api_secret=secret).build_auth_headers()

    @pytest.mark.unit
    def test_missing_config_fails_fast(self, monkeypatch):
        monkeypatch.setattr('feed_resolver.config.PODCASTINDEX_API_SECRET', None)
        with pytest.raises(ConfigurationError):
            DirectoryAuthSigner().build_auth_headers()


class TestPodcastIndexClient:

    @pytest.fixture
    def client(self, signer):
        return PodcastIndexClient(signer=signer)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_search_by_title(self, client, mock_http):
        mock_http.get(PODCASTINDEX_BYTITLE, payload={
            'status': 'true',
            'feeds': [
                podcast_index_feed('The Daily', 'https://feeds.example.com/daily', 'News', 'The New York Times'),
                podcast_index_feed('The Daily Show', 'https://feeds.example.com/show'),
            ],
            'count': 2,
        })

        feeds = await client.search_by_title('the daily')

        assert [f.url for f in feeds] == ['https://feeds.example.com/daily', 'https://feeds.example.com/show']
        assert feeds[0].author == 'The New York Times'
        assert feeds[0].description == 'News'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_request_carries_auth_and_query(self, client, mock_http):
        mock_http.get(PODCASTINDEX_BYTERM, payload={'feeds': []})

        await client.search_by_term('the daily')

        (method, url), calls = next(iter(mock_http.requests.items()))
        headers = calls[0].kwargs['headers']
        assert url.query['q'] == 'the daily'
        assert headers['X-Auth-Key'] == 'test-key'
        assert 'Authorization' in headers and 'X-Auth-Date' in headers
        assert headers['User-Agent']

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_status_raises(self, client, mock_http):
        mock_http.get(PODCASTINDEX_BYTITLE, status=401, body='Unauthorized')

        with pytest.raises(DirectorySearchError) as exc_info:
            await client.search_by_title('the daily')

        assert exc_info.value.status == 401

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_feeds_is_empty(self, client, mock_http):
        mock_http.get(PODCASTINDEX_BYTITLE, payload={'status': 'true', 'count': 0})

        assert await client.search_by_title('unknown show') == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_feeds_without_url_skipped(self, client, mock_http):
        mock_http.get(PODCASTINDEX_BYTITLE, payload={
            'feeds': [{'title': 'No URL'}, podcast_index_feed('Has URL', 'https://feeds.example.com/ok')]
        })

        feeds = await client.search_by_title('show')

        assert [f.title for f in feeds] == ['Has URL']
