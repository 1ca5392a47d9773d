"""Upload body size limit, enforced while the body streams in."""

import logging

from fastapi import HTTPException
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class BodyTooLarge(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=413, detail="File too large")


class UploadSizeLimitMiddleware:
    """Caps the request body of POSTs to ``path`` at ``max_bytes``.

    A declared Content-Length over the cap is answered with 413 straight away.
    Otherwise the bytes handed to the app are counted, and ``BodyTooLarge`` is
    raised from ``receive`` as soon as the count passes the cap, so chunked
    bodies are cut off too.
    """

    def __init__(self, app: ASGIApp, max_bytes: int, path: str):
        self.app = app
        self.max_bytes = max_bytes
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("method") != "POST" or scope.get("path") != self.path:
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        cl = headers.get(b"content-length", b"").decode("latin-1")
        if cl.isdigit() and int(cl) > self.max_bytes:
            logger.info("upload_rejected content_length=%s", cl)
            response = JSONResponse(status_code=413, content={"message": "File too large"})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.info("upload_rejected received_bytes=%s", received)
                    raise BodyTooLarge()
            return message

        await self.app(scope, limited_receive, send)
