"""Tests for InMemoryProfileStore."""

import pytest

from tests.factories.accounts import ProfileFactory
from warden.db.errors import AuthorizationError, ConflictError, NotFoundError
from warden.identity.models import Identity
from warden.profile.models import ProfileUpdate
from warden.profile.provisioning import profile_provisioner
from warden.profile.stores import InMemoryProfileStore


@pytest.fixture
def store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


class TestProvisionAndGet:
    """Tests for provisioning and reading profiles."""

    @pytest.mark.asyncio
    async def test_provision_then_get(self, store: InMemoryProfileStore) -> None:
        profile = ProfileFactory.create(id="U1")
        await store.provision(profile)

        assert await store.get("U1", "U1") == profile

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store: InMemoryProfileStore) -> None:
        assert await store.get("U1", "U1") is None

    @pytest.mark.asyncio
    async def test_duplicate_provision_conflicts(self, store: InMemoryProfileStore) -> None:
        await store.provision(ProfileFactory.create(id="U1"))
        with pytest.raises(ConflictError):
            await store.provision(ProfileFactory.create(id="U1"))

    @pytest.mark.asyncio
    async def test_other_caller_cannot_read(self, store: InMemoryProfileStore) -> None:
        await store.provision(ProfileFactory.create(id="U1"))
        with pytest.raises(AuthorizationError):
            await store.get("U2", "U1")

    @pytest.mark.asyncio
    async def test_provisioner_hook(self, store: InMemoryProfileStore) -> None:
        hook = profile_provisioner(store)
        await hook(Identity(id="U1", email="a@b.com", attributes={"first_name": "Ada"}))

        profile = await store.get("U1", "U1")
        assert profile is not None
        assert profile.first_name == "Ada"


class TestUpdate:
    """Tests for profile updates."""

    @pytest.mark.asyncio
    async def test_update_applies_all_fields(self, store: InMemoryProfileStore) -> None:
        original = ProfileFactory.create(id="U1", phone_number="555")
        await store.provision(original)

        updated = await store.update(
            "U1", "U1", ProfileUpdate(first_name="Grace", last_name="Hopper")
        )

        assert updated.first_name == "Grace"
        assert updated.phone_number is None
        assert updated.created_at == original.created_at
        assert await store.get("U1", "U1") == updated

    @pytest.mark.asyncio
    async def test_update_missing_raises(self, store: InMemoryProfileStore) -> None:
        with pytest.raises(NotFoundError):
            await store.update("U1", "U1", ProfileUpdate(first_name="A", last_name="B"))

    @pytest.mark.asyncio
    async def test_other_caller_cannot_update(self, store: InMemoryProfileStore) -> None:
        await store.provision(ProfileFactory.create(id="U1"))
        with pytest.raises(AuthorizationError):
            await store.update("U2", "U1", ProfileUpdate(first_name="A", last_name="B"))
