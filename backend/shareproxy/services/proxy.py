"""Streaming download proxy with per-request event logging."""
import traceback
import uuid
from typing import AsyncIterator, Optional
from urllib.parse import urlparse

import anyio
import httpx
from fastapi.responses import JSONResponse, Response, StreamingResponse

from shareproxy.core.http import browser_headers
from shareproxy.services.log_store import LogStore

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def is_http_url(url: str) -> bool:
    """Only plain http(s) URLs may be proxied."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ('http', 'https')


class StreamingProxy:
    """
    Relays a remote resource to the caller without buffering it.

    Every step is recorded in the log store under the request's correlation
    id so a client can follow a download from another request.
    """

    def __init__(self, client: httpx.AsyncClient, log_store: LogStore):
        self.client = client
        self.log_store = log_store

    def log(self, log_id: str, message: str) -> None:
        """Record an event; a failing log store never breaks the download."""
        try:
            self.log_store.add(log_id, message)
        except Exception as e:
            print(f"⚠ Could not record proxy log for {log_id}: {e}")

    async def open(self, remote_url: Optional[str], log_id: Optional[str] = None) -> Response:
        """Start proxying remote_url and return the response to send back."""
        log_id = log_id or str(uuid.uuid4())
        self.log(log_id, f"Starting proxy for {remote_url}")

        if not remote_url:
            self.log(log_id, "No remote URL provided")
            return JSONResponse(status_code=400, content={"error": "Missing url query param", "id": log_id})

        if not is_http_url(remote_url):
            self.log(log_id, "Invalid protocol")
            return JSONResponse(status_code=400, content={"error": "Invalid URL protocol", "id": log_id})

        upstream: Optional[httpx.Response] = None
        try:
            self.log(log_id, "Fetching remote resource...")
            request = self.client.build_request(
                "GET",
                remote_url,
                headers=browser_headers(**{"Accept-Encoding": "identity"}),
            )
            upstream = await self.client.send(request, stream=True)

            if not upstream.is_success:
                self.log(log_id, f"Remote responded with status {upstream.status_code}")
                await upstream.aclose()
                return JSONResponse(
                    status_code=502,
                    content={"error": "Remote fetch failed", "status": upstream.status_code, "id": log_id},
                )

            content_type = upstream.headers.get("content-type")
            self.log(log_id, f"Remote OK. Content-Type: {content_type}")

            headers = {"content-type": content_type or DEFAULT_CONTENT_TYPE}
            disposition = upstream.headers.get("content-disposition")
            if disposition:
                headers["content-disposition"] = disposition

            relay = UpstreamRelay(self, upstream, log_id)
            return RelayResponse(relay, headers=headers)

        except Exception as e:
            self.log(log_id, f"Error: {e}")
            print(f"ERROR: proxy {log_id} for {remote_url}")
            traceback.print_exc()
            if upstream is not None:
                await upstream.aclose()
            return JSONResponse(status_code=500, content={"error": str(e), "id": log_id})


class UpstreamRelay:
    """
    One upstream body being relayed to one caller.

    ``finish`` records the terminal log entry and closes the upstream
    response; only its first call logs.
    """

    def __init__(self, proxy: StreamingProxy, upstream: httpx.Response, log_id: str):
        self.proxy = proxy
        self.upstream = upstream
        self.log_id = log_id
        self.finished = False

    async def finish(self, message: str) -> None:
        if not self.finished:
            self.finished = True
            self.proxy.log(self.log_id, message)
        with anyio.CancelScope(shield=True):
            await self.upstream.aclose()

    async def chunks(self) -> AsyncIterator[bytes]:
        # Cancellation and generator close fall through with the default message
        message = "client disconnected"
        try:
            async for chunk in self.upstream.aiter_raw():
                self.proxy.log(self.log_id, f"streamed {len(chunk)} bytes")
                yield chunk
        except Exception as e:
            message = f"stream error: {e}"
            raise
        else:
            message = "stream end"
        finally:
            await self.finish(message)


class RelayResponse(StreamingResponse):
    """Streaming response that settles its relay even if the body never started."""

    def __init__(self, relay: UpstreamRelay, **kwargs):
        super().__init__(relay.chunks(), **kwargs)
        self.relay = relay

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.relay.finish("client disconnected")
