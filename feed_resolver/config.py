"""Configuration and constants for the feed resolver"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back to default on bad input"""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# API Keys
PODCASTINDEX_API_KEY = os.getenv("PODCASTINDEX_API_KEY")
PODCASTINDEX_API_SECRET = os.getenv("PODCASTINDEX_API_SECRET")
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET")

# Endpoints
PODCASTINDEX_BASE_URL = os.getenv("PODCASTINDEX_BASE_URL", "https://api.podcastindex.org/api/1.0")
ITUNES_SEARCH_URL = os.getenv("ITUNES_SEARCH_URL", "https://itunes.apple.com/search")
SPOTIFY_API_BASE = os.getenv("SPOTIFY_API_BASE", "https://api.spotify.com/v1")
SPOTIFY_TOKEN_URL = os.getenv("SPOTIFY_TOKEN_URL", "https://accounts.spotify.com/api/token")

# HTTP
USER_AGENT = os.getenv("USER_AGENT", "Listener-App/1.0")
RSS_USER_AGENT = "Mozilla/5.0 (compatible; PodcastMatcher/1.0)"
HTTP_TIMEOUT = env_float("HTTP_TIMEOUT", 10.0)  # seconds, total per request

# Candidate scoring (see processing/candidate_scorer.py)
RSS_MATCH_TITLE_WEIGHT = env_float("RSS_MATCH_TITLE_WEIGHT", 0.6)
RSS_MATCH_DESCRIPTION_WEIGHT = env_float("RSS_MATCH_DESCRIPTION_WEIGHT", 0.25)
RSS_MATCH_PUBLISHER_BONUS = env_float("RSS_MATCH_PUBLISHER_BONUS", 0.15)
RSS_MATCH_THRESHOLD = env_float("RSS_MATCH_THRESHOLD", 0.8)

# Episode probe
PROBE_CACHE_TTL_MINUTES = env_float("PROBE_CACHE_TTL_MINUTES", 30)

# Logging
DEBUG_RSS_MATCHING = os.getenv("DEBUG_RSS_MATCHING", "false").lower() == "true"
