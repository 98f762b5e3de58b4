"""Shared builders for the TopGames tests."""

from typing import Any, Dict, List

import httpx

from topgames.config import Settings
from topgames.database import build_engine, init_db

ANDROID_URL = "https://feeds.test/android.top100.json"
IOS_URL = "https://feeds.test/ios.top100.json"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite://",
        "android_feed_url": ANDROID_URL,
        "ios_feed_url": IOS_URL,
        "scheduler_enabled": False,
    }
    values.update(overrides)
    return Settings(**values)


def make_engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    return engine


def chart_entry(i: int, prefix: str = "Game") -> Dict[str, Any]:
    return {
        "publisher_id": 1000 + i,
        "name": f"{prefix} {i}",
        "app_id": 5000 + i,
        "bundle_id": f"com.example.{prefix.lower()}{i}",
        "version": f"1.{i}.0",
    }


def make_chart(total: int, chunk: int = 10, prefix: str = "Game") -> List[List[Dict[str, Any]]]:
    """A chart document shaped like the real feeds: a list of pages."""
    entries = [chart_entry(i, prefix) for i in range(total)]
    return [entries[i : i + chunk] for i in range(0, total, chunk)]


def feed_transport(android: Any, ios: Any, status: Dict[str, int] | None = None):
    """MockTransport serving the two chart documents.

    `status` maps "android"/"ios" to an error status code for that feed.
    """
    status = status or {}
    documents = {ANDROID_URL: ("android", android), IOS_URL: ("ios", ios)}

    def handler(request: httpx.Request) -> httpx.Response:
        platform, document = documents[str(request.url)]
        if platform in status:
            return httpx.Response(status[platform], json={"error": "unavailable"})
        return httpx.Response(200, json=document)

    return httpx.MockTransport(handler)
