"""Account workflow configuration models."""

from pydantic import BaseModel, Field


class AccountsConfig(BaseModel):
    """Validation and change-tracking policy for account workflows."""

    name_min_length: int = Field(
        default=2,
        ge=1,
        description="Minimum length of first and last names",
    )
    password_min_length: int = Field(
        default=8,
        ge=1,
        description="Minimum password length",
    )
    treat_empty_phone_as_absent: bool = Field(
        default=True,
        description="Empty phone number and no phone number compare equal when diffing",
    )
    history_limit: int = Field(
        default=100,
        gt=0,
        description="Maximum rows loaded into each history view",
    )
    client_agent: str = Field(
        default="warden",
        description="Agent string used in the default client descriptor",
    )
