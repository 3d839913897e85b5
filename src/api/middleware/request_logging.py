"""Per-request id and access log line."""

import logging
import time
import uuid

from fastapi import Request

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("api.access")


async def log_requests(request: Request, call_next):
    """Tag the request with an id (reusing the caller's X-Request-ID) and log its outcome."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request.state.request_id = request_id
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        logger.error(
            "Request failed",
            extra={
                "requestId": request_id,
                "method": request.method,
                "path": request.url.path,
                "durationMs": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        raise

    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "Request completed",
        extra={
            "requestId": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "durationMs": round((time.perf_counter() - start) * 1000, 2),
        },
    )
    return response
