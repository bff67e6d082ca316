"""
Users module - identity records and user administration.
"""

from classhub.modules.users.models import User, UserRole
from classhub.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
