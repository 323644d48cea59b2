"""Request ID middleware (raw ASGI).

Forwards a safe client-supplied request id or mints one, echoes it on the
response, and publishes it to the request context so audit records carry
it. The context is cleared when the request finishes.
"""

import re
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.shared.context import clear_request_context, set_request_id

# Anything else (including over-long values) is replaced, so ids are safe to log.
_SAFE_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")


class RequestIDMiddleware:
    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name
        self._header_key = header_name.lower().encode("latin-1")

    def _incoming(self, scope: Scope) -> str | None:
        for key, value in scope.get("headers", []):
            if key.lower() == self._header_key:
                candidate = value.decode("latin-1").strip()
                if _SAFE_REQUEST_ID.fullmatch(candidate):
                    return candidate
                return None
        return None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming(scope) or uuid.uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id
        set_request_id(request_id)
        header = (self.header_name.encode("latin-1"), request_id.encode("latin-1"))

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [*message.get("headers", []), header]
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        finally:
            clear_request_context()
