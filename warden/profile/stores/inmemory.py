"""In-memory implementation of ProfileStore."""

from warden.db.errors import AuthorizationError, ConflictError, NotFoundError
from warden.profile.models import Profile, ProfileUpdate
from warden.profile.store import ProfileStore


class InMemoryProfileStore(ProfileStore):
    """In-memory implementation of ProfileStore for testing and development.

    Applies the same row-level rules as the database policies.
    """

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}

    async def get(self, caller_id: str, profile_id: str) -> Profile | None:
        """Get a profile by identity."""
        if caller_id != profile_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not read profile {profile_id}"
            )
        return self._profiles.get(profile_id)

    async def update(
        self, caller_id: str, profile_id: str, update: ProfileUpdate
    ) -> Profile:
        """Apply a partial update and return the stored row."""
        if caller_id != profile_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not update profile {profile_id}"
            )
        existing = self._profiles.get(profile_id)
        if existing is None:
            raise NotFoundError(f"Profile not found: {profile_id}")

        updated = existing.model_copy(update=update.model_dump())
        self._profiles[profile_id] = updated
        return updated

    async def provision(self, profile: Profile) -> Profile:
        """Create the profile row for a newly established identity."""
        if profile.id in self._profiles:
            raise ConflictError(f"Profile already exists: {profile.id}")
        self._profiles[profile.id] = profile
        return profile
