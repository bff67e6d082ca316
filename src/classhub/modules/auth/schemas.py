"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from classhub.core.config import get_settings
from classhub.modules.users.schemas import UserResponse

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 72
# bcrypt only accepts the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return value


def check_otp_code(value: str) -> str:
    """Codes are all digits, exactly as long as the configured code length."""
    length = get_settings().otp_length
    if len(value) != length or not (value.isascii() and value.isdigit()):
        raise ValueError(f"Code must be {length} digits")
    return value


class RegisterRequest(BaseModel):
    """Registration request schema."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    confirm_password: str
    phone_number: str | None = Field(default=None, min_length=9, max_length=15)

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, v: str) -> str:
        return check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class EmailRequest(BaseModel):
    """Request carrying only an email (resend code, forgot password)."""

    email: EmailStr


class VerifyEmailRequest(BaseModel):
    email: EmailStr
    code: str

    @field_validator("code")
    @classmethod
    def code_format(cls, v: str) -> str:
        return check_otp_code(v)


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    """Password reset with a one-time code."""

    email: EmailStr
    code: str
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    confirm_new_password: str

    @field_validator("code")
    @classmethod
    def code_format(cls, v: str) -> str:
        return check_otp_code(v)

    @field_validator("new_password")
    @classmethod
    def password_fits_hash(cls, v: str) -> str:
        return check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ResetPasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match")
        return self


class TokenResponse(BaseModel):
    """Token pair schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(TokenResponse):
    """Login response schema."""

    user: UserResponse
