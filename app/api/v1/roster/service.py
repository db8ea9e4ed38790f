"""Roster aggregation: fetch, index, assemble. Read-only."""

import logging
from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.exceptions import RosterAggregationError

from .assembler import assemble_roster
from .fetch import fetch_roster_rows
from .schemas import ClassRoster

logger = logging.getLogger(__name__)


async def get_roster(session_factory: async_sessionmaker, user_id: str) -> List[ClassRoster]:
    """
    Every class the user teaches, fully assembled and validated.

    Any failure while reading, assembling or validating is logged with its
    traceback and reported as a single RosterAggregationError; callers never
    see partial data.
    """
    try:
        rows = await fetch_roster_rows(session_factory, user_id)
        classes = [ClassRoster.model_validate(record) for record in assemble_roster(rows)]
    except Exception as exc:
        logger.exception("Roster aggregation failed for user %s", user_id)
        raise RosterAggregationError() from exc
    logger.debug("Assembled roster for user %s: %d classes", user_id, len(classes))
    return classes
