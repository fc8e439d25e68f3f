"""Auth request payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...services.auth import MIN_PASSWORD_LENGTH


class _Form(BaseModel):
    model_config = ConfigDict(
        str_strip_whitespace=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class RegisterForm(_Form):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=80)
    last_name: Optional[str] = Field(default=None, max_length=80)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        if "@" not in value:
            raise ValueError("Enter a valid email address.")
        return value.lower()


class LoginForm(_Form):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class PasswordChangeForm(_Form):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)


__all__ = ["LoginForm", "PasswordChangeForm", "RegisterForm"]
