"""Spotify Web API access: client-credentials token, show metadata, latest episode"""

import re
import time
import base64
import asyncio
import aiohttp
from typing import Optional
from urllib.parse import urlparse

from .. import config
from ..exceptions import ConfigurationError, SpotifyError
from ..models import ShowMetadata, SpotifyEpisode
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Refresh this many seconds before Spotify says the token expires
TOKEN_REFRESH_MARGIN = 60

_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # pictographs, emoticons, transport, symbols
    "\U00002600-\U000027BF"  # misc symbols, dingbats
    "\U0000FE0F"             # variation selector
    "]+"
)


def parse_show_id(spotify_url: str) -> str:
    """Extract the show id from an open.spotify.com/show/<id> URL"""
    clean_url = spotify_url.split('?')[0]
    parts = urlparse(clean_url).path.strip('/').split('/')
    if len(parts) < 2 or parts[0] != 'show' or not parts[1]:
        raise ValueError(f"Not a Spotify show link: {spotify_url}")
    return parts[1]


def normalize_show_name(name: str) -> str:
    """Lowercase, drop anything after '|' and strip emoji"""
    name = name.lower()
    name = re.sub(r'\|.*$', '', name)
    name = _EMOJI_RE.sub('', name)
    return name.strip()


class SpotifyClient:
    """Minimal Spotify Web API client for show identification"""

    def __init__(self, client_id: Optional[str] = None, client_secret: Optional[str] = None,
                 api_base: Optional[str] = None, token_url: Optional[str] = None,
                 timeout: Optional[float] = None):
        self.client_id = client_id if client_id is not None else config.SPOTIFY_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else config.SPOTIFY_CLIENT_SECRET
        self.api_base = (api_base or config.SPOTIFY_API_BASE).rstrip('/')
        self.token_url = token_url or config.SPOTIFY_TOKEN_URL
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT)
        self._token = None
        self._token_expires = 0.0

    async def get_access_token(self) -> str:
        """Get or refresh the client-credentials access token"""
        if self._token and time.time() < self._token_expires:
            return self._token

        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Spotify credentials missing. Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET")

        credentials = base64.b64encode(
            f"{self.client_id}:{self.client_secret}".encode()
        ).decode()
        headers = {
            'Authorization': f'Basic {credentials}',
            'Content-Type': 'application/x-www-form-urlencoded'
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.token_url, headers=headers,
                                        data={'grant_type': 'client_credentials'}) as response:
                    if response.status != 200:
                        raise SpotifyError(f"Spotify auth failed: {response.status}", status=response.status)
                    token_data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SpotifyError(f"Spotify token request failed: {e}") from e

        self._token = token_data['access_token']
        self._token_expires = time.time() + int(token_data.get('expires_in', 3600)) - TOKEN_REFRESH_MARGIN
        return self._token

    async def get_show_metadata(self, spotify_url: str) -> ShowMetadata:
        """
        Look up a show and return metadata ready for feed resolution.

        The returned metadata carries the show id and the access token so the
        episode probe can run.

        Raises:
            ValueError: the URL is not a Spotify show link
            SpotifyError: the show could not be fetched or has no name
        """
        show_id = parse_show_id(spotify_url)
        token = await self.get_access_token()

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(f"{self.api_base}/shows/{show_id}",
                                       headers={'Authorization': f'Bearer {token}'}) as response:
                    if response.status != 200:
                        raise SpotifyError(
                            f"Failed to fetch show {show_id} from Spotify: {response.status}",
                            status=response.status
                        )
                    show = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SpotifyError(f"Spotify show request failed: {e}") from e

        name = normalize_show_name(show.get('name') or '')
        if not name:
            raise SpotifyError(f"No show name returned from Spotify for {show_id}")

        return ShowMetadata(
            name=name,
            description=show.get('description') or '',
            publisher=(show.get('publisher') or '').strip(),
            spotify_show_id=show_id,
            access_token=token,
        )

    async def get_latest_episode(self, show_id: str, access_token: str) -> Optional[SpotifyEpisode]:
        """Most recent episode of a show, or None on any failure"""
        headers = {
            'Authorization': f'Bearer {access_token}',
            'Content-Type': 'application/json'
        }
        params = {'limit': 1, 'market': 'US'}

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(f"{self.api_base}/shows/{show_id}/episodes",
                                       headers=headers, params=params) as response:
                    if response.status != 200:
                        logger.warning(f"[EpisodeProbe] Spotify API error: {response.status}")
                        return None
                    data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"[EpisodeProbe] Error fetching Spotify episode: {e}")
            return None

        items = data.get('items') if isinstance(data, dict) else None
        if not items or not isinstance(items[0], dict):
            return None
        return SpotifyEpisode.from_dict(items[0])
