"""
Route error handling.

A decorator that turns domain exceptions raised by services into
HTTPExceptions with the right status code, logging each failure with
context. App-level handlers (see support_desk.main) render every
HTTPException as `{"success": false, "error": ...}`.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from support_desk.core.exceptions import (
    SessionNotFoundError,
    StorageError,
    StoredFileNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def handle_api_errors(fallback_message: str = "Internal server error") -> Callable[[F], F]:
    """
    Map service exceptions to HTTP errors.

    - SessionNotFoundError, StoredFileNotFoundError -> 404
    - ValidationError (incl. UploadRejectedError), ValueError, pydantic errors -> 400
    - StorageError and anything unexpected -> 500 with `fallback_message`

    Args:
        fallback_message: Client-facing message for unexpected failures
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)

            except HTTPException:
                raise

            except SessionNotFoundError as e:
                logger.warning(
                    "Session not found",
                    extra={"session_id": e.session_id, "route": func.__name__},
                )
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

            except StoredFileNotFoundError as e:
                logger.info("Stored file not found", extra={"details": e.details})
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

            except ValidationError as e:
                logger.warning(
                    "Invalid request",
                    extra={"route": func.__name__, "error": str(e)},
                )
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

            except PydanticValidationError as e:
                logger.warning("Pydantic validation error", extra={"error": str(e)})
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=e.errors()[0].get("msg", "Invalid request") if e.errors() else "Invalid request",
                )

            except ValueError as e:
                logger.warning("Invalid request (ValueError)", extra={"error": str(e)})
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

            except StorageError as e:
                logger.error(
                    "Storage failure",
                    extra={"route": func.__name__, "error": str(e)},
                    exc_info=True,
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=fallback_message,
                )

            except Exception as e:
                logger.exception(
                    "Unexpected failure",
                    extra={"route": func.__name__, "error": str(e)},
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=fallback_message,
                )

        return wrapper  # type: ignore

    return decorator
