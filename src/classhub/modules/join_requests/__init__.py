"""
Join requests module - students asking to enter classrooms, admins deciding.
"""

from classhub.modules.join_requests.models import JoinRequest, JoinRequestStatus

__all__ = ["JoinRequest", "JoinRequestStatus"]
