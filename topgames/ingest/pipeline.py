"""TopGames — Populate Pipeline.

Runs the full data flow:
  fetch both feeds → flatten + truncate → normalize → replace the games table

The delete and the bulk insert share one transaction, so a failed insert
leaves the previous rows in place.
"""

from typing import Any, Dict, List

from sqlalchemy import delete
from sqlmodel import Session

from topgames.config import settings
from topgames.connectors.stores.client import StoreFeedClient
from topgames.connectors.stores.transformer import normalize_chart
from topgames.models.game import Game, PopulateResult
from topgames.core.logging import get_logger

logger = get_logger("ingest.pipeline")


def replace_all_games(session: Session, records: List[Dict[str, Any]]) -> int:
    """Delete every game and insert `records` in a single transaction.

    Returns the number of rows inserted. Rolls back and re-raises on failure.
    """
    try:
        session.exec(delete(Game))  # type: ignore
        games = [Game(**values) for values in records]
        session.add_all(games)
        session.flush()
        session.commit()
    except Exception:
        session.rollback()
        raise
    return len(games)


async def run_populate(
    session: Session,
    client: StoreFeedClient,
    limit: int | None = None,
) -> PopulateResult:
    """Replace the games table with the current top charts of both stores."""
    limit = settings.source_limit if limit is None else limit

    documents = await client.fetch_top_charts()

    android_games = normalize_chart(documents["android"], "android", limit)
    ios_games = normalize_chart(documents["ios"], "ios", limit)
    for platform, games in (("android", android_games), ("ios", ios_games)):
        logger.info(
            f"Normalized {len(games)} {platform} games",
            extra={"platform": platform, "count": len(games)},
        )

    inserted = replace_all_games(session, android_games + ios_games)
    logger.info(f"Games table replaced with {inserted} rows", extra={"count": inserted})

    return PopulateResult(
        count=inserted,
        android_count=len(android_games),
        ios_count=len(ios_games),
    )
