"""Identity: provider interface, implementations and session context."""

from warden.identity.models import Identity, Session, SessionState
from warden.identity.provider import IdentityProvider, IdentityProviderError
from warden.identity.session import SessionContext

__all__ = [
    "Identity",
    "IdentityProvider",
    "IdentityProviderError",
    "Session",
    "SessionContext",
    "SessionState",
]
