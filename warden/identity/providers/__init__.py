"""Identity provider implementations."""

from warden.identity.providers.gotrue import GoTrueIdentityProvider
from warden.identity.providers.inmemory import InMemoryIdentityProvider

__all__ = [
    "GoTrueIdentityProvider",
    "InMemoryIdentityProvider",
]
