"""TopGames — Game Models.

`Game` is the persisted table. The pydantic schemas below are the JSON surface,
which speaks camelCase (publisherId, storeId, ...) while columns stay snake_case.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field

PLATFORMS = ("android", "ios")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ─────────────────────────────────────────────
# DATABASE MODEL
# ─────────────────────────────────────────────


class Game(SQLModel, table=True):
    """A game listed on one of the app stores.

    bundle_id is not unique: populate replaces the whole table
    rather than upserting.
    """

    __tablename__ = "games"

    id: Optional[int] = Field(default=None, primary_key=True)
    publisher_id: Optional[str] = Field(default=None)
    name: Optional[str] = Field(default=None, index=True)
    platform: Optional[str] = Field(
        default=None, index=True, description="android | ios"
    )
    store_id: Optional[str] = Field(default=None)
    bundle_id: Optional[str] = Field(default=None)
    app_version: Optional[str] = Field(default=None)
    is_published: Optional[bool] = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# ─────────────────────────────────────────────
# PYDANTIC SCHEMAS
# ─────────────────────────────────────────────


class CamelModel(BaseModel):
    """Base for camelCase JSON schemas that also accept field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class GameIn(CamelModel):
    """Request body for create and update. Every field is optional."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    publisher_id: Optional[str] = None
    name: Optional[str] = None
    platform: Optional[str] = None
    store_id: Optional[str] = None
    bundle_id: Optional[str] = None
    app_version: Optional[str] = None
    is_published: Optional[bool] = None

    @field_validator("platform")
    @classmethod
    def normalize_platform(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v is not None else None


class GameOut(CamelModel):
    """A stored game as returned by the API."""

    id: int
    publisher_id: Optional[str] = None
    name: Optional[str] = None
    platform: Optional[str] = None
    store_id: Optional[str] = None
    bundle_id: Optional[str] = None
    app_version: Optional[str] = None
    is_published: Optional[bool] = None
    created_at: datetime
    updated_at: datetime


class PopulateResult(CamelModel):
    """Summary returned by POST /api/games/populate."""

    message: str = "Database populated successfully"
    count: int
    android_count: int
    ios_count: int
