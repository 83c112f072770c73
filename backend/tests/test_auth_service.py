"""
Periferia Social Backend — Auth Service Unit Tests
===================================================

What:  Tests for login and change_password business rules.
How:   Mock DB sessions (no real database) with a real low-cost credential
       store, so hashing behaves exactly as in production.
"""

from unittest.mock import MagicMock

import pytest

from periferia_social.exceptions import AuthenticationError, NotFoundError, ValidationError
from periferia_social.services.auth_service import AuthService, INVALID_CREDENTIALS_MESSAGE
from periferia_social.services.credential_store import CredentialStore
from periferia_social.services.token_service import TokenService


def _stored_user(store, user_id=1, password="123456"):
    user = MagicMock()
    user.id = user_id
    user.email = "juan@example.com"
    user.password_hash = store.hash(password)
    return user


def _query_returning(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestLogin:
    """Tests for AuthService.login."""

    def setup_method(self):
        self.store = CredentialStore(rounds=4)
        self.tokens = TokenService(secret_key="unit-secret")
        self.service = AuthService(credentials=self.store, tokens=self.tokens)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [(None, "x"), ("a@b.c", None), ("", ""), ("a@b.c", "")])
    async def test_missing_fields_rejected(self, mock_db_session, email, password):
        with pytest.raises(ValidationError):
            await self.service.login(mock_db_session, email=email, password=password)
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_returns_token_for_user(self, mock_db_session):
        mock_db_session.execute.return_value = _query_returning(_stored_user(self.store, user_id=5))

        token = await self.service.login(mock_db_session, "juan@example.com", "123456")

        assert self.tokens.verify(token) == 5

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_are_indistinguishable(self, mock_db_session):
        """Same status and same message either way: no account enumeration."""
        mock_db_session.execute.return_value = _query_returning(None)
        with pytest.raises(AuthenticationError) as unknown:
            await self.service.login(mock_db_session, "nobody@example.com", "123456")

        mock_db_session.execute.return_value = _query_returning(_stored_user(self.store))
        with pytest.raises(AuthenticationError) as wrong:
            await self.service.login(mock_db_session, "juan@example.com", "wrong")

        assert unknown.value.message == wrong.value.message == INVALID_CREDENTIALS_MESSAGE
        assert unknown.value.status_code == wrong.value.status_code == 401


class TestChangePassword:
    """Tests for AuthService.change_password."""

    def setup_method(self):
        self.store = CredentialStore(rounds=4)
        self.service = AuthService(credentials=self.store, tokens=TokenService(secret_key="s"))

    @pytest.mark.asyncio
    async def test_missing_fields_rejected(self, mock_db_session):
        with pytest.raises(ValidationError):
            await self.service.change_password(mock_db_session, 1, "123456", None)
        with pytest.raises(ValidationError):
            await self.service.change_password(mock_db_session, 1, None, "nueva")

    @pytest.mark.asyncio
    async def test_user_gone_is_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.change_password(mock_db_session, 99, "123456", "nueva")

    @pytest.mark.asyncio
    async def test_wrong_current_password_leaves_hash_untouched(self, mock_db_session):
        user = _stored_user(self.store)
        original_hash = user.password_hash
        mock_db_session.get.return_value = user

        with pytest.raises(ValidationError, match="Current password is incorrect"):
            await self.service.change_password(mock_db_session, 1, "wrong", "nueva")

        assert user.password_hash == original_hash
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_replaces_hash(self, mock_db_session):
        user = _stored_user(self.store)
        mock_db_session.get.return_value = user

        await self.service.change_password(mock_db_session, 1, "123456", "nueva_clave")

        assert self.store.verify("nueva_clave", user.password_hash)
        assert not self.store.verify("123456", user.password_hash)
        mock_db_session.flush.assert_awaited_once()
