"""
Unit tests for the authentication service layer.

These tests cover:
- Registration (duplicate email)
- Login (unknown email, wrong password, token and session)
- OTP password reset (issue, delivery failure, verification)
- Purge of expired credentials
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from admissions.core.security import decode_token, hash_password
from admissions.modules.auth.schemas import RegisterRequest
from admissions.modules.auth.service import (
    EmailAlreadyRegisteredError,
    EmailDeliveryError,
    InvalidCredentialsError,
    InvalidOtpError,
    UserNotFoundError,
    _hash_token,
    generate_otp,
    login,
    purge_expired_credentials,
    register_user,
    request_password_reset,
    reset_password,
)
from admissions.modules.users.repository import utcnow

REPO = "admissions.modules.auth.service.UserRepository"


@pytest.fixture
def sample_user():
    user = MagicMock()
    user.id = 7
    user.email = "office@example.edu"
    user.username = "Admissions Office"
    user.password_hash = hash_password("correct-horse")
    user.created_at = datetime(2025, 1, 1)
    return user


class TestTokenHelpers:
    def test_hash_token_is_sha256_hex(self):
        assert len(_hash_token("123456")) == 64
        assert _hash_token("123456") == _hash_token("123456")
        assert _hash_token("123456") != _hash_token("654321")

    def test_generate_otp_is_six_digits(self):
        for _ in range(50):
            otp = generate_otp()
            assert len(otp) == 6
            assert otp.isdigit()
            assert otp[0] != "0"


class TestRegister:
    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_db):
        data = RegisterRequest(email="office@example.edu", password="secret1", username="x")
        with patch(REPO) as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=True)

            with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
                await register_user(mock_db, data)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "User already exists"
        mock_db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, mock_db, sample_user):
        data = RegisterRequest(email="new@example.edu", password="secret1", username="New")
        with patch(REPO) as mock_repo:
            mock_repo.email_exists = AsyncMock(return_value=False)
            mock_repo.create = AsyncMock(return_value=sample_user)

            await register_user(mock_db, data)

        kwargs = mock_repo.create.call_args.kwargs
        assert kwargs["email"] == "new@example.edu"
        assert kwargs["password_hash"].startswith("$2")
        mock_db.commit.assert_awaited_once()


class TestLogin:
    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await login(mock_db, "nobody@example.edu", "whatever")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)

            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, sample_user.email, "wrong-password")

    @pytest.mark.asyncio
    async def test_success_issues_token_and_records_session(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.create_session = AsyncMock()

            result = await login(mock_db, sample_user.email, "correct-horse")

        payload = decode_token(result.token)
        assert payload["sub"] == "7"
        assert payload["email"] == sample_user.email
        assert payload["type"] == "access"

        user_id, token_hash, expires_at = mock_repo.create_session.call_args.args[1:]
        assert user_id == 7
        assert token_hash == _hash_token(result.token)
        assert expires_at == result.expires_at
        assert timedelta(hours=23) < result.expires_at - utcnow() <= timedelta(hours=24)
        mock_db.commit.assert_awaited_once()


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(UserNotFoundError):
                await request_password_reset(mock_db, "nobody@example.edu")

    @pytest.mark.asyncio
    async def test_stores_hash_and_emails_code(self, mock_db, sample_user):
        with (
            patch(REPO) as mock_repo,
            patch("admissions.modules.auth.service.send_password_reset_otp") as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.create_password_reset = AsyncMock()
            mock_email.return_value = True

            await request_password_reset(mock_db, sample_user.email)

        sent_otp = mock_email.call_args.args[1]
        stored_hash = mock_repo.create_password_reset.call_args.args[2]
        assert stored_hash == _hash_token(sent_otp)
        assert stored_hash != sent_otp
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delivery_failure(self, mock_db, sample_user):
        with (
            patch(REPO) as mock_repo,
            patch("admissions.modules.auth.service.send_password_reset_otp") as mock_email,
        ):
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.create_password_reset = AsyncMock()
            mock_email.return_value = False

            with pytest.raises(EmailDeliveryError) as exc_info:
                await request_password_reset(mock_db, sample_user.email)

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_invalid_code(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.find_valid_password_reset = AsyncMock(return_value=None)
            mock_repo.update_password = AsyncMock()

            with pytest.raises(InvalidOtpError):
                await reset_password(mock_db, sample_user.email, "123456", "new-secret")

        mock_repo.update_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_code_is_bound_to_user(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.find_valid_password_reset = AsyncMock(return_value=None)

            with pytest.raises(InvalidOtpError):
                await reset_password(mock_db, sample_user.email, "123456", "new-secret")

        user_id, token_hash, _now = mock_repo.find_valid_password_reset.call_args.args[1:]
        assert user_id == sample_user.id
        assert token_hash == _hash_token("123456")

    @pytest.mark.asyncio
    async def test_success_consumes_codes(self, mock_db, sample_user):
        with patch(REPO) as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=sample_user)
            mock_repo.find_valid_password_reset = AsyncMock(return_value=MagicMock())
            mock_repo.update_password = AsyncMock()
            mock_repo.delete_password_resets_for_user = AsyncMock()

            await reset_password(mock_db, sample_user.email, "123456", "new-secret")

        new_hash = mock_repo.update_password.call_args.args[2]
        assert new_hash.startswith("$2")
        mock_repo.delete_password_resets_for_user.assert_awaited_once_with(mock_db, sample_user.id)
        mock_db.commit.assert_awaited_once()


class TestPurge:
    @pytest.mark.asyncio
    async def test_returns_counts(self, mock_db):
        with patch(REPO) as mock_repo:
            mock_repo.delete_expired_sessions = AsyncMock(return_value=3)
            mock_repo.delete_expired_password_resets = AsyncMock(return_value=1)

            removed = await purge_expired_credentials(mock_db)

        assert removed == {"sessions": 3, "password_resets": 1}
        mock_db.commit.assert_awaited_once()
