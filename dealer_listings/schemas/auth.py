"""
Pydantic schemas for dealer registration and login.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from dealer_listings.utils.auth import BCRYPT_MAX_PASSWORD_BYTES, password_fits_bcrypt


class RegisterRequest(BaseModel):
    """Dealer registration request schema."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Dealer display name",
        examples=["Sunrise Realty"]
    )
    email: EmailStr = Field(
        ...,
        description="Dealer email address, must be unique",
        examples=["dealer@example.com"]
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=72,
        description="Password, at least 8 characters and at most 72 bytes in UTF-8",
        examples=["securepassword123"]
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v):
        """bcrypt reads at most 72 bytes, so longer passwords are refused."""
        if not password_fits_bcrypt(v):
            raise ValueError(f"Password cannot exceed {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="Dealer email address",
        examples=["dealer@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Dealer password",
        examples=["securepassword123"]
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class TokenResponse(BaseModel):
    """Token response schema."""

    token: str = Field(
        ...,
        description="Bearer token, valid for one hour",
        examples=["eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."]
    )


class RegisterResponse(TokenResponse):
    """Registration response schema."""

    message: str = Field(
        "Dealer registered successfully.",
        description="Confirmation message"
    )
