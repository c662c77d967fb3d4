"""
Tests for password hashing, token issuing/verification and the authentication service.
"""

import pytest
from datetime import timedelta
from jose import jwt

from dealer_listings.repositories.dealer import DealerRepository
from dealer_listings.services.auth import AuthService
from dealer_listings.utils.auth import (
    BCRYPT_ROUNDS,
    TokenService,
    hash_password,
    verify_password
)
from dealer_listings.utils.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    TokenMissingError,
    ValidationError
)
from tests.conftest import TEST_JWT_SECRET, TEST_PASSWORD, DealerFactory


class TestPasswordHashing:
    """Test bcrypt password helpers."""

    def test_hash_is_salted_bcrypt(self):
        """The same password hashes differently each time."""
        first = hash_password("securepassword123")
        second = hash_password("securepassword123")

        assert first != second
        assert first.startswith("$2b$")
        assert f"${BCRYPT_ROUNDS:02d}$" in first

    def test_verify_password(self):
        """Only the original password verifies."""
        hashed = hash_password("securepassword123")

        assert verify_password("securepassword123", hashed) is True
        assert verify_password("securepassword12", hashed) is False
        assert verify_password("SECUREPASSWORD123", hashed) is False

    def test_verify_empty_inputs(self):
        """Empty password or hash never verifies."""
        hashed = hash_password("securepassword123")

        assert verify_password("", hashed) is False
        assert verify_password("securepassword123", "") is False

    def test_hash_empty_password_rejected(self):
        """Hashing requires a password."""
        with pytest.raises(ValueError):
            hash_password("")

    def test_longer_password_with_same_prefix_never_verifies(self):
        """Input past bcrypt's 72 bytes is not silently ignored."""
        hashed = hash_password("a" * 72)

        assert verify_password("a" * 72, hashed) is True
        assert verify_password("a" * 72 + "WRONG", hashed) is False

    def test_password_limit_counts_bytes(self):
        """Multi-byte characters count by their UTF-8 length."""
        assert verify_password("é" * 36, hash_password("é" * 36)) is True

        with pytest.raises(ValueError):
            hash_password("é" * 37)


class TestTokenService:
    """Test token issue and verification."""

    def test_issue_and_verify(self, token_service: TokenService):
        """A freshly issued token verifies to the same dealer."""
        token = token_service.issue(42)

        assert token_service.verify(token) == 42

    def test_payload_claims(self, token_service: TokenService):
        """Tokens carry subject, issue time, expiry and type."""
        token = token_service.issue(7)
        claims = jwt.decode(token, TEST_JWT_SECRET, algorithms=["HS256"])

        assert claims["sub"] == "7"
        assert claims["type"] == "access"
        assert claims["exp"] - claims["iat"] == 60 * 60

    def test_decode_returns_payload(self, token_service: TokenService):
        """Decoded payload exposes the dealer and the validity window."""
        payload = token_service.decode(token_service.issue(3))

        assert payload.dealer_id == 3
        assert payload.expires_at - payload.issued_at == timedelta(minutes=60)

    def test_expires_in(self, token_service: TokenService):
        """Lifetime is reported in seconds."""
        assert token_service.expires_in == 3600

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token_service: TokenService, token):
        """An absent token is reported as missing."""
        with pytest.raises(TokenMissingError) as exc_info:
            token_service.verify(token)

        assert exc_info.value.status_code == 403

    def test_expired_token(self, token_service: TokenService):
        """A token past its expiry is rejected as expired."""
        token = token_service.issue(1, expires_delta=timedelta(minutes=-5))

        with pytest.raises(TokenExpiredError) as exc_info:
            token_service.verify(token)

        assert exc_info.value.status_code == 401

    def test_token_signed_with_other_secret(self, token_service: TokenService):
        """Tokens from another signer are invalid."""
        other = TokenService(secret_key="a-completely-different-secret-value-123456")
        token = other.issue(1)

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_tampered_payload(self, token_service: TokenService):
        """Swapping the payload of a signed token breaks the signature."""
        header, _, signature = token_service.issue(1).split(".")
        forged_payload = token_service.issue(2).split(".")[1]

        with pytest.raises(InvalidTokenError):
            token_service.verify(f"{header}.{forged_payload}.{signature}")

    @pytest.mark.parametrize("token", ["not-a-token", "a.b.c", "Bearer abc"])
    def test_malformed_token(self, token_service: TokenService, token):
        """Garbage is rejected as invalid."""
        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_wrong_token_type(self, token_service: TokenService):
        """Only access tokens are accepted."""
        token = jwt.encode({"sub": "1", "iat": 0, "exp": 4102444800, "type": "refresh"}, TEST_JWT_SECRET)

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_non_numeric_subject(self, token_service: TokenService):
        """The subject must be a dealer id."""
        token = jwt.encode({"sub": "abc", "iat": 0, "exp": 4102444800, "type": "access"}, TEST_JWT_SECRET)

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_secret_required(self):
        """A signer cannot be built without a secret."""
        with pytest.raises(ValueError):
            TokenService(secret_key="")


class TestAuthService:
    """Test registration and login flows."""

    @pytest.mark.asyncio
    async def test_register(self, auth_service: AuthService, token_service: TokenService):
        """Registration stores a hashed password and returns a token for the new dealer."""
        dealer, token = await auth_service.register("Sunrise Realty", "Owner@Example.com", "securepassword123")

        assert dealer.id is not None
        assert dealer.email == "owner@example.com"
        assert dealer.password_hash != "securepassword123"
        assert verify_password("securepassword123", dealer.password_hash)
        assert token_service.verify(token) == dealer.id

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service: AuthService):
        """The second registration with the same email fails, the first stands."""
        first, _ = await auth_service.register("First", "dup@example.com", "securepassword123")

        with pytest.raises(DuplicateEmailError) as exc_info:
            await auth_service.register("Second", "DUP@example.com", "otherpassword123")

        assert exc_info.value.status_code == 500
        assert await auth_service.verify_credentials("dup@example.com", "securepassword123") == first.id

    @pytest.mark.asyncio
    async def test_register_requires_fields(self, auth_service: AuthService):
        """Empty fields are rejected before touching the store."""
        with pytest.raises(ValidationError):
            await auth_service.register("", "x@example.com", "securepassword123")

    @pytest.mark.asyncio
    async def test_login(self, auth_service: AuthService, dealer_repository: DealerRepository, token_service: TokenService):
        """Correct credentials produce a token for that dealer."""
        dealer = await DealerFactory.create_dealer(dealer_repository, email="login@example.com")

        token = await auth_service.login("login@example.com", TEST_PASSWORD)

        assert token_service.verify(token) == dealer.id

    @pytest.mark.asyncio
    async def test_login_email_case_insensitive(self, auth_service: AuthService, dealer_repository: DealerRepository):
        """Emails are matched after normalization."""
        dealer = await DealerFactory.create_dealer(dealer_repository, email="case@example.com")

        assert await auth_service.verify_credentials("  CASE@Example.com ", TEST_PASSWORD) == dealer.id

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, auth_service: AuthService, dealer_repository: DealerRepository):
        """A wrong password never authenticates."""
        await DealerFactory.create_dealer(dealer_repository, email="wrong@example.com")

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login("wrong@example.com", TEST_PASSWORD + "x")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_register_rejects_password_over_bcrypt_limit(self, auth_service: AuthService):
        """A password bcrypt would truncate is refused at registration."""
        with pytest.raises(ValidationError):
            await auth_service.register("Long", "long@example.com", "é" * 40)

    @pytest.mark.asyncio
    async def test_login_longer_password_sharing_prefix(self, auth_service: AuthService):
        """Appending characters to a 72-byte password does not still log in."""
        await auth_service.register("Prefix", "prefix@example.com", "a" * 72)

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login("prefix@example.com", "a" * 72 + "WRONG")

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, auth_service: AuthService):
        """Unknown emails fail exactly like wrong passwords."""
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.login("nobody@example.com", TEST_PASSWORD)

        assert exc_info.value.detail == "Invalid email or password."
