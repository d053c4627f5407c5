"""Sign-in and sign-out with login-history recording.

Every sign-in submission that reaches the identity provider produces
exactly one login-history row, whatever the outcome. The row is written
before the failure is raised or the signed-in hook runs.
"""

import platform
from collections.abc import Awaitable, Callable
from typing import Any

from warden import __version__
from warden.accounts.forms import LoginForm
from warden.audit.recorder import AuditRecorder
from warden.config.models.accounts import AccountsConfig
from warden.errors import AuthenticationFailure
from warden.identity.models import Session
from warden.identity.provider import IdentityProvider, IdentityProviderError
from warden.identity.session import SessionContext
from warden.observability.logging import get_logger
from warden.observability.metrics import LOGIN_ATTEMPTS

logger = get_logger(__name__)

SignedInHook = Callable[[Session], Awaitable[Any]]
SignedOutHook = Callable[[], Awaitable[Any]]


def default_client_descriptor(agent: str = "warden") -> str:
    """Device/agent string in the form "<platform> - <agent>"."""
    system = f"{platform.system()} {platform.machine()}".strip() or "unknown"
    return f"{system} - {agent}/{__version__} Python/{platform.python_version()}"


class SignInService:
    """Signs a client in and out and records each sign-in attempt."""

    def __init__(
        self,
        provider: IdentityProvider,
        recorder: AuditRecorder,
        session: SessionContext,
        *,
        policy: AccountsConfig | None = None,
        on_signed_in: SignedInHook | None = None,
        on_signed_out: SignedOutHook | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            provider: Identity provider that checks credentials
            recorder: Audit recorder for login-history rows
            session: Session context updated on sign-in and sign-out
            policy: Validation policy for the login form
            on_signed_in: Navigation hook, awaited after the success row
            on_signed_out: Navigation hook, awaited after sign-out
        """
        self._provider = provider
        self._recorder = recorder
        self._session = session
        self._policy = policy or AccountsConfig()
        self._on_signed_in = on_signed_in
        self._on_signed_out = on_signed_out

    async def sign_in(
        self,
        email: str,
        password: str,
        *,
        client_descriptor: str | None = None,
    ) -> Session:
        """Authenticate and start a session.

        Raises:
            pydantic.ValidationError: If the form is invalid; nothing is
                sent to the provider and nothing is recorded
            AuthenticationFailure: If the provider rejects the credentials,
                after the failure row has been attempted
        """
        form = LoginForm.model_validate(
            {"email": email, "password": password},
            context={"policy": self._policy},
        )
        descriptor = client_descriptor or default_client_descriptor(self._policy.client_agent)

        try:
            session = await self._provider.sign_in_with_password(form.email, form.password)
        except IdentityProviderError as e:
            LOGIN_ATTEMPTS.labels(outcome="failure").inc()
            # No verified identity exists, so the submitted email is the subject
            # and the row is inserted anonymously. The result is discarded.
            await self._recorder.record_login_attempt(
                form.email,
                False,
                descriptor,
                e.message,
                caller_id=None,
            )
            logger.info("sign_in_rejected", status_code=e.status_code)
            raise AuthenticationFailure(e.message) from e

        LOGIN_ATTEMPTS.labels(outcome="success").inc()
        identity_id = session.identity.id
        await self._recorder.record_login_attempt(
            identity_id,
            True,
            descriptor,
            caller_id=identity_id,
        )
        self._session.set(session)
        logger.info("sign_in_succeeded", identity_id=identity_id)

        if self._on_signed_in is not None:
            await self._on_signed_in(session)
        return session

    async def sign_out(self) -> None:
        """End the session with the provider and clear the local context."""
        await self._provider.sign_out()
        self._session.clear()
        logger.info("signed_out")
        if self._on_signed_out is not None:
            await self._on_signed_out()
