"""In-memory identity provider for testing and development."""

import hashlib
import hmac
import secrets
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

from warden.identity.models import Identity, Session
from warden.identity.provider import IdentityProvider, IdentityProviderError
from warden.observability.logging import get_logger

logger = get_logger(__name__)

UserCreatedHook = Callable[[Identity], Awaitable[Any]]


@dataclass
class _UserRecord:
    identity: Identity
    salt: bytes
    password_hash: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(password.encode(), salt=salt, n=2**14, r=8, p=1)


class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider backed by a dict of users.

    Passwords are stored as scrypt hashes. The optional on_user_created
    hook runs after each sign-up and plays the role of the database
    trigger that provisions a profile row.
    """

    def __init__(
        self,
        on_user_created: UserCreatedHook | None = None,
        session_ttl: timedelta = timedelta(hours=1),
    ) -> None:
        self._users: dict[str, _UserRecord] = {}
        self._on_user_created = on_user_created
        self._session_ttl = session_ttl
        self._current: Session | None = None

    async def sign_up(
        self, email: str, password: str, attributes: dict[str, Any]
    ) -> Identity:
        """Create an identity. Does not sign it in."""
        key = email.strip().lower()
        if key in self._users:
            raise IdentityProviderError("User already registered", status_code=422)

        salt = secrets.token_bytes(16)
        identity = Identity(id=str(uuid4()), email=key, attributes=dict(attributes))
        self._users[key] = _UserRecord(
            identity=identity,
            salt=salt,
            password_hash=_hash_password(password, salt),
        )
        logger.info("identity_created", identity_id=identity.id)

        if self._on_user_created is not None:
            await self._on_user_created(identity)
        return identity

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        """Authenticate credentials and start a session."""
        user = self._users.get(email.strip().lower())
        if user is None or not hmac.compare_digest(
            user.password_hash, _hash_password(password, user.salt)
        ):
            raise IdentityProviderError("Invalid login credentials", status_code=400)

        self._current = Session(
            identity=user.identity,
            access_token=secrets.token_urlsafe(32),
            refresh_token=secrets.token_urlsafe(32),
            expires_at=datetime.now(UTC) + self._session_ttl,
        )
        return self._current

    async def sign_out(self) -> None:
        """End the current session, if any."""
        self._current = None

    async def get_session(self) -> Session | None:
        """Return the current session, or None when signed out or expired."""
        session = self._current
        if session and session.expires_at and session.expires_at <= datetime.now(UTC):
            self._current = None
            return None
        return session
