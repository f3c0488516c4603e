"""
Decorators for phone mode router endpoints.
"""

from functools import wraps
from http import HTTPStatus

from fastapi import HTTPException

from src.db.phone_modes.exceptions import PhoneModeError
from src.utils.logger import logger


def handle_phone_mode_errors(operation: str):
    """
    Decorator translating service errors into HTTP responses.

    Domain errors become client errors with their own message. Anything
    else rolls back the session, is logged, and becomes a generic 500 that
    does not expose the underlying cause.

    Args:
        operation: Description of the operation for error messages (e.g., "add number")

    Returns:
        Decorator function
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except PhoneModeError as e:
                service = kwargs.get("service")
                if service:
                    await service.session.rollback()
                logger.info(
                    "[PHONE_MODES] Request rejected",
                    operation=operation,
                    status_code=int(e.status_code),
                    reason=e.message,
                )
                raise HTTPException(status_code=e.status_code, detail=e.message)
            except Exception as e:
                service = kwargs.get("service")
                if service:
                    await service.session.rollback()

                logger.exception(
                    "[PHONE_MODES] Operation failed",
                    operation=operation,
                    error=str(e),
                )

                raise HTTPException(
                    status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                    detail=f"Failed to {operation}",
                )

        return wrapper

    return decorator
