"""Account error hierarchy.

All errors surfaced by account workflows inherit from WardenError, which
carries a generic user_message suitable for display. The detailed cause
stays on the exception chain and in the logs.
"""


class WardenError(Exception):
    """Base exception for account workflow errors."""

    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationFailure(WardenError):
    """Raised when the identity provider rejects the submitted credentials."""

    user_message = "Failed to sign in. Please check your credentials."


class AuthorizationFailure(WardenError):
    """Raised when there is no session or the store rejects the caller.

    Shown with the same generic message as other store errors.
    """


class AuditWriteFailure(WardenError):
    """A login-history or profile-change row could not be written.

    Never raised out of the recorder; carried on AuditWriteResult.
    """


class PrimaryCommitFailure(WardenError):
    """Raised when the profile row itself could not be updated."""

    user_message = "Failed to update profile"


class LoadFailure(WardenError):
    """Raised when the profile or a history view could not be fetched."""

    def __init__(self, message: str, view: str) -> None:
        super().__init__(message)
        self.view = view
        self.user_message = f"Failed to load {view}"


class RegistrationFailure(WardenError):
    """Raised when the identity provider rejects a sign-up."""

    user_message = "Failed to register. Please try again."


class ProfileNotLoadedError(WardenError):
    """Raised when a profile is submitted before a snapshot was loaded."""
