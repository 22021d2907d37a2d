"""
Correlation IDs for requests.

Each request is tagged with a short ID that appears in every log line it
produces and is returned in the ``X-Correlation-ID`` response header, so a
failed dashboard call can be matched with the server logs. A caller may
send its own ID in the same header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Correlation-ID"
ID_LENGTH = 8

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    """
    Tag each request with a correlation ID.

    The ID is taken from the request header or generated, cut to
    ``ID_LENGTH`` characters, stored in ``request.state.request_id`` and in
    a context variable for the log formatters, and echoed in the response.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        cid = (request.headers.get(HEADER) or uuid.uuid4().hex)[:ID_LENGTH]
        request.state.request_id = cid

        token = correlation_id.set(cid)
        try:
            response = await call_next(request)
        finally:
            correlation_id.reset(token)

        response.headers[HEADER] = cid
        return response


def get_correlation_id() -> str:
    """Correlation ID of the current request, or ``""`` outside one."""
    return correlation_id.get()
