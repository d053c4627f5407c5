"""PostgreSQL implementation of ProfileStore.

Uses asyncpg through caller-scoped transactions so the database's
row-level security policies decide what each caller can see and change.
"""

from typing import Any

from warden.db.errors import (
    AuthorizationError,
    ConnectionError,
    NotFoundError,
    StoreError,
)
from warden.db.pool import PostgresPool
from warden.observability.logging import get_logger
from warden.profile.models import Profile, ProfileUpdate
from warden.profile.store import ProfileStore

logger = get_logger(__name__)

_COLUMNS = "id, first_name, last_name, phone_number, created_at, updated_at"


class PostgresProfileStore(ProfileStore):
    """PostgreSQL implementation of ProfileStore."""

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def get(self, caller_id: str, profile_id: str) -> Profile | None:
        """Get a profile by identity."""
        if caller_id != profile_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not read profile {profile_id}"
            )
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                row = await conn.fetchrow(
                    f"SELECT {_COLUMNS} FROM public.profiles WHERE id = $1",
                    profile_id,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_get_profile_error", profile_id=profile_id, error=str(e))
            raise ConnectionError(f"Failed to get profile: {e}", cause=e) from e

        if row:
            return self._row_to_profile(row)
        return None

    async def update(
        self, caller_id: str, profile_id: str, update: ProfileUpdate
    ) -> Profile:
        """Apply a partial update and return the stored row.

        Under RLS a row the caller does not own is simply invisible, so a
        zero-row update surfaces as NotFoundError.
        """
        if caller_id != profile_id:
            raise AuthorizationError(
                f"Caller {caller_id} may not update profile {profile_id}"
            )
        try:
            async with self._pool.acquire_as(caller_id) as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE public.profiles
                    SET first_name = $2, last_name = $3,
                        phone_number = $4, updated_at = $5
                    WHERE id = $1
                    RETURNING {_COLUMNS}
                    """,
                    profile_id,
                    update.first_name,
                    update.last_name,
                    update.phone_number,
                    update.updated_at,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_update_profile_error", profile_id=profile_id, error=str(e)
            )
            raise ConnectionError(f"Failed to update profile: {e}", cause=e) from e

        if row is None:
            raise NotFoundError(f"Profile not found: {profile_id}")
        logger.debug("profile_updated", profile_id=profile_id)
        return self._row_to_profile(row)

    async def provision(self, profile: Profile) -> Profile:
        """Create the profile row for a newly established identity.

        Runs with the pool's own role, like the database trigger.
        """
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO public.profiles ({_COLUMNS})
                    VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                    profile.id,
                    profile.first_name,
                    profile.last_name,
                    profile.phone_number,
                    profile.created_at,
                    profile.updated_at,
                )
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_provision_profile_error", profile_id=profile.id, error=str(e)
            )
            raise ConnectionError(f"Failed to provision profile: {e}", cause=e) from e
        return profile

    def _row_to_profile(self, row: Any) -> Profile:
        return Profile(
            id=str(row["id"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            phone_number=row["phone_number"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
