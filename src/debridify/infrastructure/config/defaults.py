"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "debridify",
    "environment": "dev",
    "server": {
        "host": "0.0.0.0",
        "port": 7000,
        "public_base_url": None,
        "public_dir": "./public",
    },
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "Debridify/0.1.0",
        "retry_max_attempts": 3,
        "retry_backoff_base": 1.0,
        "retry_max_backoff": 30.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
        "file_dir": None,
    },
    "cache": {
        "max_entries": 10_000,
        "resolved_link_ttl_seconds": 3600,
    },
    "jackett": {
        "url": "http://localhost:9117/api/v2.0",
        "timeout_seconds": 15.0,
        "movie_limit": 50,
        "series_limit": 100,
        "anime_limit": 33,
        "anime_indexers": ["nyaasi", "subsplease", "animetosho"],
        "anime_category": 5070,
    },
    "omdb": {
        "url": "https://www.omdbapi.com/",
    },
    "realdebrid": {
        "url": "https://api.real-debrid.com/rest/1.0",
    },
    "anilist": {
        "url": "https://graphql.anilist.co",
    },
}
