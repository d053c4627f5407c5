"""Account workflows: registration, sign-in and profile editing."""

from warden.accounts.coordinator import (
    FieldChange,
    MutationOutcome,
    MutationState,
    Notice,
    ProfileMutationCoordinator,
    ProfileView,
    diff_profile,
)
from warden.accounts.forms import LoginForm, ProfileForm, RegistrationForm
from warden.accounts.login import SignInService, default_client_descriptor
from warden.accounts.registration import RegistrationService

__all__ = [
    "FieldChange",
    "LoginForm",
    "MutationOutcome",
    "MutationState",
    "Notice",
    "ProfileForm",
    "ProfileMutationCoordinator",
    "ProfileView",
    "RegistrationForm",
    "RegistrationService",
    "SignInService",
    "default_client_descriptor",
    "diff_profile",
]
