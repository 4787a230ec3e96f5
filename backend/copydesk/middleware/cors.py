"""
Copydesk Backend — CORS Headers Middleware
============================================

What:  Sends the same fixed CORS headers on every response and answers every
       OPTIONS request with an empty 200.
Who:   Outermost middleware, so error responses carry the headers too.

Starlette's CORSMiddleware only short-circuits true preflights (Origin plus
Access-Control-Request-Method) and echoes headers conditionally. The plugin
runtime sends bare OPTIONS probes and expects the headers unconditionally,
so this middleware applies them itself.
"""

from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Args:
        headers: Header name → value pairs added to every response
                 (see Settings.cors_headers).
    """

    def __init__(self, app: ASGIApp, headers: Dict[str, str]):
        super().__init__(app)
        self.headers = dict(headers)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.headers)

        response = await call_next(request)
        for name, value in self.headers.items():
            response.headers[name] = value
        return response
