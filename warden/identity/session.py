"""Explicit, owned session state for one client."""

from warden.errors import AuthorizationFailure
from warden.identity.models import Identity, Session, SessionState
from warden.identity.provider import IdentityProvider
from warden.observability.logging import get_logger

logger = get_logger(__name__)


class SessionContext:
    """Tracks the current session and hands the identity to services.

    Starts UNKNOWN until refresh() has asked the provider, or until a
    sign-in or sign-out sets it. Services take the acting identity from
    here on every call instead of subscribing to global auth state.
    """

    def __init__(self, provider: IdentityProvider) -> None:
        self._provider = provider
        self._session: Session | None = None
        self._state = SessionState.UNKNOWN

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def identity(self) -> Identity | None:
        return self._session.identity if self._session else None

    async def refresh(self) -> Session | None:
        """Ask the provider for the current session."""
        self._session = await self._provider.get_session()
        self._state = (
            SessionState.AUTHENTICATED if self._session else SessionState.ANONYMOUS
        )
        logger.debug("session_refreshed", state=self._state.value)
        return self._session

    def set(self, session: Session) -> None:
        self._session = session
        self._state = SessionState.AUTHENTICATED

    def clear(self) -> None:
        self._session = None
        self._state = SessionState.ANONYMOUS

    def require_identity(self) -> Identity:
        """Return the signed-in identity.

        Raises:
            AuthorizationFailure: If the session is unknown or anonymous
        """
        if self._state is not SessionState.AUTHENTICATED or self._session is None:
            raise AuthorizationFailure(f"No authenticated session (state={self._state.value})")
        return self._session.identity
