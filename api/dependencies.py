"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
from uuid import UUID
import hmac

from fastapi import Header
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import UnauthorizedError
from domain.models import get_db_session


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, description="Authenticated user id"),
) -> UUID:
    """
    Caller identity.

    Authentication happens upstream; the gateway forwards the verified user
    id in the X-User-Id header.
    """
    if not x_user_id:
        raise UnauthorizedError("Missing X-User-Id header", code="MISSING_USER")
    try:
        return UUID(x_user_id)
    except ValueError:
        raise UnauthorizedError(
            "X-User-Id is not a valid user id",
            details={"x_user_id": x_user_id},
            code="INVALID_USER",
        )


def require_job_token(
    authorization: Optional[str] = Header(None, description="Bearer <job token>"),
) -> None:
    """Guard for the scheduled job endpoints"""
    if not settings.job_token:
        raise UnauthorizedError(
            "Scheduled jobs are disabled: no job credential is configured",
            code="JOB_TOKEN_NOT_CONFIGURED",
        )
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Missing job credential", code="MISSING_JOB_TOKEN")
    if not hmac.compare_digest(token.strip(), settings.job_token):
        raise UnauthorizedError("Invalid job credential", code="INVALID_JOB_TOKEN")
