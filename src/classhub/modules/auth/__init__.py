"""
Auth module - one-time codes, session tokens and the account lifecycle.

The router lives in classhub.modules.auth.router and is mounted by
classhub.api; it is not imported here so core.auth can depend on this
package without a cycle.
"""

from classhub.modules.auth.models import OtpCode, OtpPurpose, RefreshToken
from classhub.modules.auth.otp import OtpIssuer
from classhub.modules.auth.tokens import SessionTokenIssuer

__all__ = ["OtpCode", "OtpPurpose", "RefreshToken", "OtpIssuer", "SessionTokenIssuer"]
