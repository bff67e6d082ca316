"""
Core module - Configuration, database, security, and utilities.
"""

from classhub.core.config import Settings, get_settings, settings
from classhub.core.database import Base, close_db, get_db, init_db
from classhub.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    UnprocessableError,
)
from classhub.core.redis import close_redis, init_redis, is_redis_available
from classhub.core.security import (
    create_access_token,
    decode_token,
    generate_numeric_code,
    generate_refresh_token,
    hash_password,
    hash_token,
    verify_password,
)

__all__ = [
    # Config
    "Settings",
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "UnprocessableError",
    # Redis
    "init_redis",
    "close_redis",
    "is_redis_available",
    # Security
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "generate_refresh_token",
    "generate_numeric_code",
    "hash_token",
]
