import time
from datetime import datetime, timezone
from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError
from .. import errors

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    return {
        "success": True,
        "status": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    }


@router.get("/ready")
async def ready(request: Request):
    try:
        await request.app.state.db.ping()
    except SQLAlchemyError:
        raise errors.StoreFailure("Database not ready")
    return {"success": True, "status": "ok"}
