from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from lesson_market.api.deps import DatabaseSession

router = APIRouter()


@router.get("")
async def health_check() -> dict:
    """Liveness check for load balancers."""
    return {"status": "healthy"}


@router.get("/db")
async def health_check_db(db: DatabaseSession) -> dict:
    """Report whether the lesson store answers a trivial query."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {"status": "unhealthy", "database": str(e)}
    return {"status": "healthy", "database": "connected"}
