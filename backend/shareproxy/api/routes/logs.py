"""Proxy event log routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from shareproxy.api.deps import get_log_store
from shareproxy.schemas import LogsResponse
from shareproxy.services.log_store import LogStore

router = APIRouter(tags=["logs"])


@router.get("/logs", response_model=LogsResponse)
async def get_logs(
    id: Optional[str] = Query(None, description="Correlation id"),
    log_store: LogStore = Depends(get_log_store),
):
    """Get the events recorded for a proxy request."""
    if not id:
        return JSONResponse(status_code=400, content={"error": "Missing id"})
    return LogsResponse(id=id, logs=log_store.get(id))


@router.post("/clear-logs")
async def clear_logs(log_store: LogStore = Depends(get_log_store)):
    """Wipe every recorded proxy event."""
    log_store.clear()
    return {"ok": True}


@router.get("/logs/stats")
async def get_log_stats(log_store: LogStore = Depends(get_log_store)):
    """Log store statistics for monitoring."""
    return log_store.stats()
