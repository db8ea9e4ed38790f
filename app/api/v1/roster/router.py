"""Roster API router."""

from typing import List

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.config import get_settings
from app.core.exceptions import ServiceError
from app.db.session import get_session_factory

from . import service
from .schemas import ClassRoster, RosterErrorResponse

router = APIRouter(prefix="/api/v1/roster", tags=["roster"])


@router.get(
    "",
    response_model=List[ClassRoster],
    responses={500: {"model": RosterErrorResponse}},
)
async def get_roster(
    response: Response,
    session_factory: async_sessionmaker = Depends(get_session_factory),
    current_user: CurrentUser = Depends(get_current_user),
):
    """All classes of the current teacher with groups, students, catalogue and tasks. Safe to poll."""
    try:
        classes = await service.get_roster(session_factory, current_user.id)
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    response.headers["Cache-Control"] = f"private, max-age={get_settings().roster_cache_seconds}"
    return classes
