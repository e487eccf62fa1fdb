"""HTTP middleware: request logging, body size guard and security headers"""

import time
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from src.utils.logger import get_logger

logger = get_logger("http")

# largest form body accepted (knowledge base content is the big one)
MAX_BODY_BYTES = 2 * 1024 * 1024


async def request_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log every request with its outcome and timing"""
    start_time = time.time()

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
        logger.warning(
            "Request body too large",
            path=request.url.path,
            content_length=int(content_length),
        )
        return PlainTextResponse(
            f"Request body too large, at most {MAX_BODY_BYTES // (1024 * 1024)}MB is accepted",
            status_code=413,
        )

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        "HTTP request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        process_time=process_time,
        client_ip=request.client.host if request.client else None,
    )
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    return response


async def security_headers_middleware(request: Request, call_next: Callable) -> Response:
    """Security headers for the rendered pages"""
    response = await call_next(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Content-Security-Policy"] = (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; form-action 'self'"
    )

    return response
