"""Global middleware."""

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request

from user_service.logging_config import correlation_id_var

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "x-correlation-id"


def register_middleware(app: FastAPI) -> None:
    """Attach app-level middleware."""

    @app.middleware("http")
    async def correlation_id(request: Request, call_next):
        value = request.headers.get(CORRELATION_ID_HEADER) or str(uuid4())
        request.state.correlation_id = value
        token = correlation_id_var.set(value)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            elapsed = time.perf_counter() - start
            logger.debug("%s %s %.3fs", request.method, request.url.path, elapsed)
            correlation_id_var.reset(token)
        response.headers[CORRELATION_ID_HEADER] = value
        return response
