"""FastAPI dependencies for resolving the acting user.

The caller's identity arrives as an already-authenticated user ID in the
configured actor header. Each request loads one group snapshot and resolves
the actor's permission against it.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.application.services import AccessContextService, GroupSnapshot
from groupscope.core.config import get_settings
from groupscope.core.logging import LoggingContext, get_logger
from groupscope.domain.entities.permission import UserPermission
from groupscope.domain.exceptions import UserNotFoundError
from groupscope.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)


@dataclass
class RequestContext:
    """Authorization context for a single request."""

    actor: UserPermission
    snapshot: GroupSnapshot


async def get_request_context(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RequestContext:
    """Resolve the acting user's permission for this request.

    Raises:
        HTTPException: 401 if the actor header is missing or names an
            unknown or deactivated user.
    """
    header = get_settings().actor_header
    user_id = request.headers.get(header)
    if not user_id:
        logger.info("Authentication failed: missing actor header", header=header)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header} header",
        )

    access = AccessContextService(session)
    with LoggingContext(actor_id=user_id):
        snapshot = await access.load_snapshot()
        try:
            actor = await access.get_user_permission(user_id, snapshot)
        except UserNotFoundError:
            logger.info("Authentication failed: unknown or inactive user")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unknown or inactive user",
            )

    return RequestContext(actor=actor, snapshot=snapshot)


# Type aliases for dependency injection
DBSession = Annotated[AsyncSession, Depends(get_db_session)]
Context = Annotated[RequestContext, Depends(get_request_context)]
