"""Main API router - aggregates all route modules."""
from fastapi import APIRouter

from shareproxy.api.routes import metadata, proxy, logs

api_router = APIRouter(prefix="/api")

api_router.include_router(metadata.router)
api_router.include_router(proxy.router)
api_router.include_router(logs.router)
