"""Shared upstream HTTP client."""
from typing import Optional
import httpx

from shareproxy.core.config import settings

# Persistent HTTP client
_client: Optional[httpx.AsyncClient] = None


def get_client() -> httpx.AsyncClient:
    """Get or create persistent HTTP client with connection pooling."""
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout, connect=settings.upstream_connect_timeout),
            follow_redirects=True,
            verify=True,
            limits=httpx.Limits(
                max_keepalive_connections=50,
                max_connections=200,
                keepalive_expiry=60.0,
            ),
            http2=True,
        )
    return _client


async def close_client() -> None:
    """Close the persistent client."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
    _client = None


def browser_headers(**extra: str) -> dict:
    """Headers that make upstream sites treat us like a regular browser."""
    headers = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    headers.update(extra)
    return headers
