"""Proxy route for streaming remote downloads through the server."""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from shareproxy.api.deps import get_proxy
from shareproxy.services.proxy import StreamingProxy

router = APIRouter(tags=["proxy"])


@router.get("/proxy")
async def proxy_download(
    url: Optional[str] = Query(None, description="Remote http(s) URL to stream"),
    id: Optional[str] = Query(None, description="Correlation id for the event log"),
    proxy: StreamingProxy = Depends(get_proxy),
):
    """Stream a remote file, mirroring its content type and filename."""
    return await proxy.open(url, id)
