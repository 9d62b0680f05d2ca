"""Turns failed Results into HTTP errors."""
from __future__ import annotations
from typing import NoReturn

from fastapi import HTTPException, status

from superfeynman.domain.common.errors import ErrorKind
from superfeynman.domain.common.result import Result

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.RATE_LIMITED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_result(result: Result) -> NoReturn:
    kind = result.kind or ErrorKind.INVALID_INPUT
    raise HTTPException(
        status_code=STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=result.error,
        headers={"X-Error-Kind": kind.value},
    )
