"""Profile provisioning for newly created identities.

Mirrors the database trigger that inserts a profile row whenever the
identity provider creates a user. Used with stores that have no such
trigger, such as the in-memory stack.
"""

from collections.abc import Awaitable, Callable

from warden.identity.models import Identity
from warden.observability.logging import get_logger
from warden.profile.models import Profile
from warden.profile.store import ProfileStore

logger = get_logger(__name__)


def profile_from_identity(identity: Identity) -> Profile:
    """Build the initial profile row from sign-up attributes."""
    attributes = identity.attributes
    return Profile(
        id=identity.id,
        first_name=attributes.get("first_name") or "",
        last_name=attributes.get("last_name") or "",
        phone_number=attributes.get("phone_number") or None,
    )


def profile_provisioner(store: ProfileStore) -> Callable[[Identity], Awaitable[Profile]]:
    """Return a user-created hook that provisions profiles into store."""

    async def provision(identity: Identity) -> Profile:
        profile = await store.provision(profile_from_identity(identity))
        logger.info("profile_provisioned", profile_id=profile.id)
        return profile

    return provision
