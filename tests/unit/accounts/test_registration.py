"""Tests for RegistrationService."""

import pytest
from pydantic import ValidationError

from warden.accounts.forms import RegistrationForm
from warden.accounts.registration import RegistrationService
from warden.config.models.accounts import AccountsConfig
from warden.errors import RegistrationFailure
from warden.identity.providers import InMemoryIdentityProvider
from warden.profile.provisioning import profile_provisioner
from warden.profile.stores import InMemoryProfileStore

FORM = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@mail.org",
    "password": "Secret123!",
    "phone_number": "555",
}


class TestRegister:
    """Tests for registering new accounts."""

    @pytest.mark.asyncio
    async def test_register_provisions_profile(self) -> None:
        profiles = InMemoryProfileStore()
        provider = InMemoryIdentityProvider(on_user_created=profile_provisioner(profiles))
        service = RegistrationService(provider)

        identity = await service.register(FORM)

        profile = await profiles.get(identity.id, identity.id)
        assert profile is not None
        assert profile.first_name == "Ada"
        assert profile.phone_number == "555"
        assert await provider.get_session() is None

    @pytest.mark.asyncio
    async def test_accepts_validated_form(self) -> None:
        service = RegistrationService(InMemoryIdentityProvider())
        identity = await service.register(RegistrationForm(**FORM))
        assert identity.email == "ada@mail.org"

    @pytest.mark.asyncio
    async def test_duplicate_email_raises_registration_failure(self) -> None:
        service = RegistrationService(InMemoryIdentityProvider())
        await service.register(FORM)

        with pytest.raises(RegistrationFailure, match="User already registered") as exc:
            await service.register(FORM)
        assert exc.value.user_message == "Failed to register. Please try again."

    @pytest.mark.asyncio
    async def test_policy_applies_to_mapping(self) -> None:
        service = RegistrationService(
            InMemoryIdentityProvider(), policy=AccountsConfig(password_min_length=12)
        )
        with pytest.raises(ValidationError, match="at least 12"):
            await service.register(FORM)
