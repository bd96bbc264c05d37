"""
Route-level handling of storage failures.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import TypeVar

from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., object])


def handle_db_errors(message: str) -> Callable[[F], F]:
    """
    Wrap a sync path operation so database or file write failures become a 500
    response carrying a fixed message. The original exception is logged with
    its traceback and never returned to the client.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: object, **kwargs: object) -> object:
            try:
                return func(*args, **kwargs)
            except (SQLAlchemyError, OSError):
                logger.exception("%s (in %s)", message, func.__name__)
                return JSONResponse(
                    status_code=HTTP_500_INTERNAL_SERVER_ERROR,
                    content={"detail": message},
                )

        return wrapper  # type: ignore[return-value]

    return decorator
