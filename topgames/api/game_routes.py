"""TopGames — Game API Routes.

Status codes follow the established contract of this API, including its
quirks: list failures answer 200 with an error body, and a missing update or
delete target is a 400 rather than a 404.
"""

import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from topgames.catalog.search import NoGamesFound, SearchFilters, search_games
from topgames.connectors.stores.client import StoreFeedClient
from topgames.database import get_session
from topgames.ingest.pipeline import run_populate
from topgames.models.game import Game, GameIn, GameOut, PopulateResult, utcnow
from topgames.core.logging import get_logger

logger = get_logger("api.games")

router = APIRouter(prefix="/api/games", tags=["Games"])


class GameNotFound(Exception):
    """Raised when an update or delete targets a missing game."""

    def __init__(self, game_id: int):
        self.game_id = game_id
        super().__init__(f"Game {game_id} not found")


async def get_feed_client(request: Request):
    """Dependency: yields a store feed client for the request."""
    client = StoreFeedClient(request.app.state.settings)
    try:
        yield client
    finally:
        await client.close()


def _get_game(session: Session, game_id: int) -> Game:
    game = session.get(Game, game_id)
    if game is None:
        raise GameNotFound(game_id)
    return game


def _bad_request(error: str, exc: Exception, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"error": error, "details": str(exc), **extra}
    )


# ── CRUD ──


@router.get("", response_model=List[GameOut])
async def list_games(session: Session = Depends(get_session)):
    """List every stored game."""
    try:
        return session.exec(select(Game).order_by(Game.id)).all()  # type: ignore
    except SQLAlchemyError as e:
        logger.exception("There was an error querying games")
        # Errors on this endpoint have always been reported with a 200
        return JSONResponse(
            status_code=200,
            content={"error": "Failed to query games", "details": str(e)},
        )


@router.post("", response_model=GameOut)
async def create_game(body: GameIn, session: Session = Depends(get_session)):
    """Create a single game."""
    game = Game(**body.model_dump(exclude_unset=True))
    try:
        session.add(game)
        session.commit()
        session.refresh(game)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("There was an error creating a game")
        return _bad_request("Failed to create game", e)
    logger.info(f"Created game {game.id}", extra={"game_id": game.id})
    return game


@router.put("/{game_id}", response_model=GameOut)
async def update_game(
    game_id: int, body: GameIn, session: Session = Depends(get_session)
):
    """Overwrite every field of a game. Fields missing from the body become null."""
    try:
        game = _get_game(session, game_id)
        for field, value in body.model_dump().items():
            setattr(game, field, value)
        game.updated_at = utcnow()
        session.add(game)
        session.commit()
        session.refresh(game)
    except GameNotFound as e:
        logger.warning(str(e), extra={"game_id": game_id})
        return _bad_request("Game not found", e, id=game_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error updating game", extra={"game_id": game_id})
        return _bad_request("Failed to update game", e, id=game_id)
    return game


@router.delete("/{game_id}")
async def delete_game(game_id: int, session: Session = Depends(get_session)):
    """Permanently delete a game."""
    try:
        game = _get_game(session, game_id)
        session.delete(game)
        session.commit()
    except GameNotFound as e:
        logger.warning(str(e), extra={"game_id": game_id})
        return _bad_request("Game not found", e, id=game_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error deleting game", extra={"game_id": game_id})
        return _bad_request("Failed to delete game", e, id=game_id)
    return {"id": game_id}


# ── Search & Populate ──


@router.post("/search", response_model=List[GameOut])
async def search(
    filters: Optional[SearchFilters] = None,
    session: Session = Depends(get_session),
):
    """Search games by name substring and/or exact platform.

    Answers 404 when nothing matches, so an empty list is never returned.
    """
    try:
        return search_games(session, filters or SearchFilters())
    except NoGamesFound as e:
        return JSONResponse(status_code=404, content={"message": str(e)})
    except Exception:
        logger.exception("Search error", extra={"endpoint": "search"})
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred while processing your request",
                "requestId": int(time.time() * 1000),
            },
        )


@router.post("/populate", response_model=PopulateResult)
async def populate(
    request: Request,
    session: Session = Depends(get_session),
    client: StoreFeedClient = Depends(get_feed_client),
):
    """Replace all games with the current Android and iOS top charts.

    Keeps the first 100 entries of each chart. Existing games are removed.
    """
    try:
        return await run_populate(
            session, client, request.app.state.settings.source_limit
        )
    except Exception as e:
        logger.exception("Population error", extra={"endpoint": "populate"})
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "Failed to populate the database",
                "details": str(e),
            },
        )
