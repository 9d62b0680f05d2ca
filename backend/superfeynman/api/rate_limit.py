"""Per-client request limits shared by the app and its routers."""
from __future__ import annotations
import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from superfeynman.core.config import RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED
from superfeynman.domain.common.errors import ErrorKind

logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit by %s on %s: %s", get_remote_address(request), request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests from this client, please try again later."},
        headers={"X-Error-Kind": ErrorKind.RATE_LIMITED.value},
    )
