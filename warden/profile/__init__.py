"""User profiles: one row per identity, edited only by its owner."""

from warden.profile.models import Profile, ProfileField, ProfileUpdate

__all__ = [
    "Profile",
    "ProfileField",
    "ProfileUpdate",
]
