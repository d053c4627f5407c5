"""Account registration."""

from collections.abc import Mapping
from typing import Any

from warden.accounts.forms import RegistrationForm
from warden.config.models.accounts import AccountsConfig
from warden.errors import RegistrationFailure
from warden.identity.models import Identity
from warden.identity.provider import IdentityProvider, IdentityProviderError
from warden.observability.logging import get_logger
from warden.observability.metrics import REGISTRATIONS

logger = get_logger(__name__)


class RegistrationService:
    """Creates identities with their initial profile attributes.

    The profile row itself is provisioned on the backend side when the
    identity is created. Registering does not sign the user in.
    """

    def __init__(
        self, provider: IdentityProvider, *, policy: AccountsConfig | None = None
    ) -> None:
        self._provider = provider
        self._policy = policy or AccountsConfig()

    async def register(self, form: RegistrationForm | Mapping[str, Any]) -> Identity:
        """Validate the form and sign the user up.

        Raises:
            pydantic.ValidationError: If the form is invalid
            RegistrationFailure: If the provider rejects the sign-up
        """
        if not isinstance(form, RegistrationForm):
            form = RegistrationForm.model_validate(form, context={"policy": self._policy})

        try:
            identity = await self._provider.sign_up(
                form.email, form.password, form.profile_attributes()
            )
        except IdentityProviderError as e:
            REGISTRATIONS.labels(outcome="failure").inc()
            logger.info("registration_rejected", status_code=e.status_code)
            raise RegistrationFailure(e.message) from e

        REGISTRATIONS.labels(outcome="success").inc()
        logger.info("registration_succeeded", identity_id=identity.id)
        return identity
