"""
Authentication utilities for JWT token management and password hashing.
Provides the token issuer/verifier and bcrypt password helpers.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, ExpiredSignatureError, jwt
from passlib.context import CryptContext
from dealer_listings.utils.exceptions import (
    TokenMissingError,
    InvalidTokenError,
    TokenExpiredError
)


BCRYPT_ROUNDS = 10

# bcrypt ignores input past this many bytes
BCRYPT_MAX_PASSWORD_BYTES = 72

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, dealer_id: int, issued_at: datetime, expires_at: datetime):
        self.dealer_id = dealer_id
        self.issued_at = issued_at
        self.expires_at = expires_at

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from decoded claims."""
        return cls(
            dealer_id=int(data["sub"]),
            issued_at=datetime.fromtimestamp(data["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


class TokenService:
    """
    Issues and verifies signed, time-limited dealer identity tokens.
    The signing key is supplied at construction and never read from globals.
    """

    token_type = "access"

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.expire_minutes * 60

    def issue(self, dealer_id: int, expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed token for a dealer.

        Args:
            dealer_id: ID of the authenticated dealer
            expires_delta: Optional custom lifetime, defaults to expire_minutes

        Returns:
            Encoded JWT token string
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=self.expire_minutes))

        to_encode = {
            "sub": str(dealer_id),
            "iat": now,
            "exp": expire,
            "type": self.token_type
        }

        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: Optional[str]) -> TokenPayload:
        """
        Verify signature and expiry and return the token payload.

        Raises:
            TokenMissingError: If no token was supplied
            TokenExpiredError: If the token is past its expiry
            InvalidTokenError: If the signature, format or claims are bad
        """
        if not token:
            raise TokenMissingError()

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise InvalidTokenError()

        if payload.get("type") != self.token_type:
            raise InvalidTokenError()

        try:
            return TokenPayload.from_dict(payload)
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError()

    def verify(self, token: Optional[str]) -> int:
        """Verify a token and return the dealer id it was issued for."""
        return self.decode(token).dealer_id


def password_fits_bcrypt(password: str) -> bool:
    """Check that bcrypt will read the whole password."""
    return len(password.encode("utf-8")) <= BCRYPT_MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Salted bcrypt hash

    Raises:
        ValueError: If password is empty or longer than bcrypt can read
    """
    if not password:
        raise ValueError("Password is required")
    if not password_fits_bcrypt(password):
        raise ValueError(f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify password against hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password from database

    Returns:
        True if password matches, False otherwise. A password longer than
        bcrypt can read never matches.
    """
    if not plain_password or not hashed_password or not password_fits_bcrypt(plain_password):
        return False
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Spend the same bcrypt work as a real check when no account exists."""
    pwd_context.dummy_verify()
