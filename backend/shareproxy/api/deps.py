"""API dependencies."""
import httpx
from fastapi import Depends, Request

from shareproxy.core.http import get_client
from shareproxy.services.extractor import MetadataExtractor
from shareproxy.services.log_store import LogStore
from shareproxy.services.proxy import StreamingProxy


def get_log_store(request: Request) -> LogStore:
    """The application's proxy log store."""
    return request.app.state.log_store


def get_extractor(client: httpx.AsyncClient = Depends(get_client)) -> MetadataExtractor:
    return MetadataExtractor(client)


def get_proxy(
    client: httpx.AsyncClient = Depends(get_client),
    log_store: LogStore = Depends(get_log_store),
) -> StreamingProxy:
    return StreamingProxy(client, log_store)


__all__ = ["get_client", "get_log_store", "get_extractor", "get_proxy"]
