"""FastAPI application entry point."""
import traceback
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shareproxy.api.router import api_router
from shareproxy.core.config import settings
from shareproxy.core.http import close_client
from shareproxy.services.log_store import LogStore

app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["content-disposition"],
)

# One log store for the lifetime of the process
app.state.log_store = LogStore()


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.api_version}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all errors."""
    print(f"ERROR: {request.method} {request.url.path}")
    print(f"Exception: {type(exc).__name__}: {exc}")
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    base_url = f"http://{settings.host}:{settings.port}"
    print("=" * 60)
    print(f"{settings.app_name} v{settings.api_version}")
    print("=" * 60)
    print(f"✓ CORS origins: {settings.cors_origins_list}")
    print(f"✓ Log store: {settings.log_store_max_ids} ids, {settings.log_store_ttl_seconds:g}s TTL")
    print("-" * 60)
    print(f"📚 API Docs:    {base_url}/docs")
    print(f"💓 Health:      {base_url}/api/health")
    print("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    print("\nShutting down...")
    await close_client()
    print("✓ Stopped")
