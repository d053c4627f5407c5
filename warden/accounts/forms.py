"""Form models for registration, sign-in and profile editing.

Length limits come from AccountsConfig, passed as validation context:

    ProfileForm.model_validate(data, context={"policy": settings.accounts})

Without a context the AccountsConfig defaults apply.
"""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

from warden.config.models.accounts import AccountsConfig

PASSWORD_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)


def _policy(info: ValidationInfo) -> AccountsConfig:
    context: dict[str, Any] = info.context or {}
    return context.get("policy") or AccountsConfig()


def _check_name(value: str, info: ValidationInfo, label: str) -> str:
    if not value.strip():
        raise ValueError(f"{label} must not be blank")
    minimum = _policy(info).name_min_length
    if len(value) < minimum:
        raise ValueError(f"{label} must be at least {minimum} characters")
    return value


def _check_password_length(value: str, info: ValidationInfo) -> str:
    minimum = _policy(info).password_min_length
    if len(value) < minimum:
        raise ValueError(f"Password must be at least {minimum} characters")
    return value


class ProfileForm(BaseModel):
    """Submitted values of the profile editor."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    phone_number: str | None = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info, "Last name")


class LoginForm(BaseModel):
    """Submitted sign-in credentials."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str = Field(..., repr=False)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str, info: ValidationInfo) -> str:
        return _check_password_length(value, info)


class RegistrationForm(BaseModel):
    """Submitted sign-up form."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    email: EmailStr
    password: str = Field(..., repr=False)
    phone_number: str | None = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, value: str, info: ValidationInfo) -> str:
        return _check_name(value, info, "Last name")

    @field_validator("password")
    @classmethod
    def _password(cls, value: str, info: ValidationInfo) -> str:
        _check_password_length(value, info)
        for pattern, message in PASSWORD_RULES:
            if not pattern.search(value):
                raise ValueError(message)
        return value

    def profile_attributes(self) -> dict[str, str | None]:
        """Attributes handed to the identity provider for provisioning."""
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_number": self.phone_number,
        }
