"""Request logging middleware."""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with a request id and echoes the id back."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse a caller-supplied id so logs can be joined across services
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        start_time = time.perf_counter()
        logger.info(f"[REQUEST] {request_id} {request.method} {request.url.path} started")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                f"[REQUEST] {request_id} {request.method} {request.url.path} "
                f"failed after {duration_ms}ms: {str(e)}"
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"[REQUEST] {request_id} {request.method} {request.url.path} "
            f"-> {response.status_code} in {duration_ms}ms"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
