"""Request body size limit middleware.

Rejects uploads larger than MAX_UPLOAD_SIZE with 413 before they reach the
multipart parser. A declared Content-Length is checked up front; chunked
bodies are buffered up to the limit and replayed to the app.
Raw ASGI (no BaseHTTPMiddleware).
"""

import json
from typing import Callable

from app.middleware.request_id import get_header


async def _reject(send: Callable, max_bytes: int) -> None:
    """Send 413 Payload Too Large."""
    body = json.dumps(
        {
            "error": "PAYLOAD_TOO_LARGE",
            "message": f"Request body must be at most {max_bytes} bytes",
            "details": {"max_bytes": max_bytes},
        }
    ).encode()
    await send(
        {
            "type": "http.response.start",
            "status": 413,
            "headers": [(b"content-type", b"application/json")],
        }
    )
    await send({"type": "http.response.body", "body": body, "more_body": False})


async def _buffer_body(receive: Callable, max_bytes: int) -> list[dict] | None:
    """Collect http.request messages; None once the total passes max_bytes."""
    messages: list[dict] = []
    total = 0
    while True:
        message = await receive()
        messages.append(message)
        if message["type"] != "http.request":
            return messages
        total += len(message.get("body", b""))
        if total > max_bytes:
            return None
        if not message.get("more_body", False):
            return messages


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject request bodies over max_bytes with 413. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None:
            if declared.strip().isdigit() and int(declared) > max_bytes:
                await _reject(send, max_bytes)
                return
            await app(scope, receive, send)
            return

        if (get_header(scope, "transfer-encoding") or "").lower() != "chunked":
            await app(scope, receive, send)
            return

        buffered = await _buffer_body(receive, max_bytes)
        if buffered is None:
            await _reject(send, max_bytes)
            return
        pending = iter(buffered)

        async def replay() -> dict:
            message = next(pending, None)
            return message if message is not None else await receive()

        await app(scope, replay, send)

    return asgi_app
