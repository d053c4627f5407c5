"""IdentityProvider abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

from warden.identity.models import Identity, Session


class IdentityProviderError(Exception):
    """Raised when the identity provider rejects a request.

    The message is the provider's own, e.g. "Invalid login credentials".
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class IdentityProvider(ABC):
    """External service that authenticates credentials and issues sessions.

    A provider instance belongs to one client and tracks that client's
    current session, the way a browser auth client does.
    """

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, attributes: dict[str, Any]
    ) -> Identity:
        """Create an identity. Does not sign it in."""
        pass

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Authenticate credentials and start a session."""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session, if any."""
        pass

    @abstractmethod
    async def get_session(self) -> Session | None:
        """Return the current session, or None when signed out."""
        pass
