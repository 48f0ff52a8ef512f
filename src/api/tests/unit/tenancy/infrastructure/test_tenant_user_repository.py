"""Unit tests for TenantUserRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tenancy.domain.aggregates import User
from tenancy.domain.value_objects import UserId
from tenancy.infrastructure.models import (
    PersonalAccessTokenModel,
    RoleModel,
    UserModel,
)
from tenancy.infrastructure.tenant_user_repository import TenantUserRepository
from tenancy.ports.exceptions import RoleNotFoundError, UserNotFoundError


@pytest.fixture
def mock_session():
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def repository(mock_session):
    return TenantUserRepository(mock_session)


def _user_model(user_id: str, roles=None) -> UserModel:
    return UserModel(
        id=user_id,
        name="Ahmed Ali",
        email="ahmed@example.com",
        password_hash="hash",
        is_active=True,
        roles=roles or [],
    )


class TestAdd:
    @pytest.mark.asyncio
    async def test_stores_hash_not_password(self, repository, mock_session):
        user = User.create(name="Ahmed Ali", email="ahmed@example.com")

        await repository.add(user, "$2b$12$hash")

        model = mock_session.add.call_args[0][0]
        assert isinstance(model, UserModel)
        assert model.id == user.id.value
        assert model.password_hash == "$2b$12$hash"
        mock_session.flush.assert_awaited_once()


class TestGetById:
    @pytest.mark.asyncio
    async def test_maps_roles(self, repository, mock_session):
        user_id = UserId.generate()
        mock_session.get.return_value = _user_model(
            user_id.value, roles=[RoleModel(name="Sales"), RoleModel(name="Admin")]
        )

        user = await repository.get_by_id(user_id)

        assert user.id == user_id
        assert user.roles == ["Admin", "Sales"]

    @pytest.mark.asyncio
    async def test_returns_none_when_not_found(self, repository, mock_session):
        mock_session.get.return_value = None

        assert await repository.get_by_id(UserId.generate()) is None


class TestAssignRole:
    """Tests for granting roles."""

    @pytest.mark.asyncio
    async def test_appends_role(self, repository, mock_session):
        user_id = UserId.generate()
        model = _user_model(user_id.value)
        role = RoleModel(name="Admin")
        mock_session.get.return_value = model
        result = MagicMock()
        result.scalar_one_or_none.return_value = role
        mock_session.execute.return_value = result

        await repository.assign_role(user_id, "Admin")

        assert model.roles == [role]

    @pytest.mark.asyncio
    async def test_unknown_user(self, repository, mock_session):
        mock_session.get.return_value = None

        with pytest.raises(UserNotFoundError):
            await repository.assign_role(UserId.generate(), "Admin")

    @pytest.mark.asyncio
    async def test_unknown_role(self, repository, mock_session):
        mock_session.get.return_value = _user_model(UserId.generate().value)
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result

        with pytest.raises(RoleNotFoundError):
            await repository.assign_role(UserId.generate(), "Overlord")


class TestTokens:
    @pytest.mark.asyncio
    async def test_add_token(self, repository, mock_session):
        user_id = UserId.generate()

        await repository.add_token(user_id, "cli", "sdk_abcdefgh", "hash")

        model = mock_session.add.call_args[0][0]
        assert isinstance(model, PersonalAccessTokenModel)
        assert model.prefix == "sdk_abcdefgh"
        assert model.user_id == user_id.value

    @pytest.mark.asyncio
    async def test_find_token_candidates(self, repository, mock_session):
        user_id = UserId.generate()
        result = MagicMock()
        result.all.return_value = [("hash-1", user_id.value)]
        mock_session.execute.return_value = result

        candidates = await repository.find_token_candidates("sdk_abcdefgh")

        assert candidates == [("hash-1", user_id)]
