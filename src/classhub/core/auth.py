"""
Authentication and Authorization Module

FastAPI dependencies that validate bearer access tokens and enforce role
policies.

Every protected route declares its allowed roles with require_roles(...),
either on the route or on its router. The check runs as a dependency, before
the handler body.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from classhub.core.config import Settings, get_settings
from classhub.core.database import get_db
from classhub.modules.auth.tokens import SessionTokenIssuer
from classhub.modules.users.models import User, UserRole
from classhub.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer access token",
)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the authenticated user from the bearer access token.

    Raises:
        HTTPException 401: Token missing, invalid or expired, or the account
            no longer exists or is inactive
    """
    if credentials is None:
        raise _unauthorized("NOT_AUTHENTICATED", "Authentication credentials were not provided.")

    payload = SessionTokenIssuer(settings).decode_access_token(credentials.credentials)
    if payload is None:
        logger.warning("Invalid or expired access token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e

    user = await UserRepository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        logger.warning(f"Token presented for missing or inactive user {user_id}")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    return user


def require_roles(*roles: UserRole):
    """
    Build a dependency that admits only users holding one of the roles.

    Usage:
        router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN))])

        @router.get("/mine")
        async def mine(user: User = Depends(require_roles(UserRole.STUDENT))):
            ...
    """
    allowed = frozenset(roles)

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: user {user.id} has role '{user.role.value}', "
                f"requires one of {sorted(role.value for role in allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "FORBIDDEN",
                    "message": "You do not have permission to perform this action.",
                },
            )
        return user

    return role_checker


require_admin = require_roles(UserRole.ADMIN)
require_student = require_roles(UserRole.STUDENT)


__all__ = [
    "get_current_user",
    "require_roles",
    "require_admin",
    "require_student",
    "security",
]
