"""Profile schemas."""

from pydantic import BaseModel, Field, field_validator, model_validator

from classhub.modules.auth.schemas import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    check_password_bytes,
)


class UpdateProfileRequest(BaseModel):
    """Fields left out of the request are not changed."""

    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone_number: str | None = Field(default=None, min_length=9, max_length=15)
    avatar_media_id: int | None = Field(default=None, ge=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    confirm_new_password: str

    @field_validator("new_password")
    @classmethod
    def password_fits_hash(cls, v: str) -> str:
        return check_password_bytes(v)

    @model_validator(mode="after")
    def passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("Passwords do not match")
        if self.new_password == self.current_password:
            raise ValueError("New password must differ from the current password")
        return self
