import logging
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from eventrsvp import __version__
from eventrsvp.config.database import engine

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = __version__


async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return False
    return True


def get_database_check() -> Callable[[], Awaitable[bool]]:
    return check_database


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    database_check: Callable[[], Awaitable[bool]] = Depends(get_database_check),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running and the database answers.
    """
    if await database_check():
        return HealthCheckResponse(status="healthy", database="ok")
    return HealthCheckResponse(status="degraded", database="unavailable")
