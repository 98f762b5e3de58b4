"""TopGames — Store Feed → Game Transformer.

Converts raw chart entries (snake_case, platform-specific) into Game insertion
values. The two platforms are intentionally not symmetric: iOS identifiers
arrive numeric and are coerced to strings, Android values pass through as-is.
"""

from typing import Any, Callable, Dict, List

from topgames.connectors.stores.client import StoreFeedError
from topgames.models.game import utcnow


def _str_or_none(value: Any) -> str | None:
    """Stringify a truthy value; falsy values become None."""
    return str(value) if value else None


def _base_values(raw: Dict[str, Any], platform: str) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        raise StoreFeedError(
            f"Expected a {platform} chart entry object, got {type(raw).__name__}"
        )
    now = utcnow()
    return {
        "publisher_id": raw.get("publisher_id"),
        "name": raw.get("name"),
        "platform": platform,
        "store_id": raw.get("app_id"),
        "bundle_id": raw.get("bundle_id"),
        "app_version": raw.get("version"),
        "is_published": True,
        "created_at": now,
        "updated_at": now,
    }


def normalize_android(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map an Android chart entry onto Game fields."""
    return _base_values(raw, "android")


def normalize_ios(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map an iOS chart entry onto Game fields, stringifying the ids."""
    values = _base_values(raw, "ios")
    values["publisher_id"] = _str_or_none(raw.get("publisher_id"))
    values["store_id"] = _str_or_none(raw.get("app_id"))
    return values


NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "android": normalize_android,
    "ios": normalize_ios,
}


def flatten_chart(document: Any) -> List[Any]:
    """Flatten a chart document one level, preserving order.

    Nested lists are spliced in; anything else is kept as a single entry.
    """
    if not isinstance(document, list):
        raise StoreFeedError(
            f"Expected a JSON array, got {type(document).__name__}"
        )
    flat: List[Any] = []
    for item in document:
        if isinstance(item, list):
            flat.extend(item)
        else:
            flat.append(item)
    return flat


def normalize_chart(
    document: Any, platform: str, limit: int = 100
) -> List[Dict[str, Any]]:
    """Flatten, keep the first `limit` entries, and normalize them."""
    try:
        normalize = NORMALIZERS[platform]
    except KeyError:
        raise ValueError(f"Unknown platform: {platform!r}") from None
    return [normalize(raw) for raw in flatten_chart(document)[:limit]]
