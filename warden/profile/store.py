"""ProfileStore abstract interface."""

from abc import ABC, abstractmethod

from warden.profile.models import Profile, ProfileUpdate


class ProfileStore(ABC):
    """Abstract interface for profile storage.

    Every read and update is scoped to a caller identity; a caller may
    only see and change its own row. Violations raise AuthorizationError.
    """

    @abstractmethod
    async def get(self, caller_id: str, profile_id: str) -> Profile | None:
        """Get a profile by identity."""
        pass

    @abstractmethod
    async def update(
        self, caller_id: str, profile_id: str, update: ProfileUpdate
    ) -> Profile:
        """Apply a partial update and return the stored row."""
        pass

    @abstractmethod
    async def provision(self, profile: Profile) -> Profile:
        """Create the profile row for a newly established identity.

        Called by the provisioning trigger, not by account workflows.
        """
        pass
