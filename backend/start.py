"""Standalone startup script."""
import uvicorn

from shareproxy.core.config import settings

if __name__ == "__main__":
    # PORT comes from the environment via settings
    print(f"Starting server on port {settings.port}...")
    uvicorn.run(
        "shareproxy.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info"
    )
