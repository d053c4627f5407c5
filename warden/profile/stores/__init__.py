"""Profile stores."""

from warden.profile.store import ProfileStore
from warden.profile.stores.inmemory import InMemoryProfileStore
from warden.profile.stores.postgres import PostgresProfileStore

__all__ = [
    "ProfileStore",
    "InMemoryProfileStore",
    "PostgresProfileStore",
]
