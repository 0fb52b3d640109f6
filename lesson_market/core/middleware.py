import json
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware


class ResponseWrapperMiddleware(BaseHTTPMiddleware):
    """Middleware that wraps all responses in {success, data/error} format."""

    # Paths to exclude from wrapping (OpenAPI, docs, etc.)
    EXCLUDED_PATHS = {"/openapi.json", "/docs", "/docs/oauth2-redirect", "/redoc"}

    def _should_wrap(self, request: Request) -> bool:
        path = request.url.path
        return not any(path.endswith(excluded) for excluded in self.EXCLUDED_PATHS)

    @staticmethod
    def _already_wrapped(data: object) -> bool:
        # exception handlers produce the envelope themselves
        return isinstance(data, dict) and "success" in data and ("data" in data or "error" in data)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if not self._should_wrap(request):
            return response

        # Skip non-JSON responses (like file downloads, redirects)
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return response

        body = b""
        async for chunk in response.body_iterator:
            body += chunk

        # 204 No Content
        if not body:
            return JSONResponse(content={"success": True, "data": None}, status_code=response.status_code)

        try:
            data = json.loads(body)
        except json.JSONDecodeError:
            return Response(
                content=body,
                status_code=response.status_code,
                media_type=response.media_type,
            )

        if self._already_wrapped(data):
            wrapped = data
        elif 200 <= response.status_code < 400:
            wrapped = {"success": True, "data": data}
        else:
            wrapped = {"success": False, "error": data}

        return JSONResponse(content=wrapped, status_code=response.status_code)
