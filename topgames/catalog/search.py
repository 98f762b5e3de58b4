"""TopGames — Game Search.

Filters are optional and combined with AND: a substring match on name and an
exact match on the lowercased platform. No filters lists everything.
"""

from typing import List, Optional

from pydantic import BaseModel, StrictStr, field_validator
from sqlmodel import Session, select
from sqlmodel.sql.expression import SelectOfScalar

from topgames.models.game import Game


class NoGamesFound(Exception):
    """Raised when a search matches no games."""


class SearchFilters(BaseModel):
    """Request body for POST /api/games/search."""

    name: Optional[StrictStr] = None
    platform: Optional[StrictStr] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Candy", "platform": "ios"},
                {"platform": "android"},
            ]
        }
    }

    @field_validator("name")
    @classmethod
    def trim_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("platform")
    @classmethod
    def normalize_platform(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().lower() or None


def build_search_statement(filters: SearchFilters) -> SelectOfScalar[Game]:
    """Build the SELECT for the given filters."""
    statement = select(Game)
    if filters.name:
        statement = statement.where(Game.name.like(f"%{filters.name}%"))  # type: ignore
    if filters.platform:
        statement = statement.where(Game.platform == filters.platform)
    return statement


def search_games(session: Session, filters: SearchFilters) -> List[Game]:
    """Run a search, raising NoGamesFound when nothing matches."""
    games = list(session.exec(build_search_statement(filters)).all())
    if not games:
        raise NoGamesFound("No games found matching the search criteria")
    return games
