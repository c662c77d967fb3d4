"""
Tests for settings validation.
"""

import pytest
from pydantic import ValidationError

from dealer_listings.config import DEVELOPMENT_JWT_SECRET, Settings


class TestSettings:
    """Test configuration defaults and validators."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.access_token_expire_minutes == 60
        assert settings.default_page_size == 20
        assert settings.max_page_size == 100
        assert settings.jwt_algorithm == "HS256"

    def test_database_url_assembled_from_parts(self):
        settings = Settings(
            _env_file=None,
            db_host="db", db_port=5433, db_user="app", db_password="pw", db_name="listings"
        )

        assert settings.sqlalchemy_database_url == "postgresql+asyncpg://app:pw@db:5433/listings"

    @pytest.mark.parametrize("url", ["postgres://u:p@h/d", "postgresql://u:p@h/d"])
    def test_database_url_uses_async_driver(self, url):
        settings = Settings(_env_file=None, database_url=url)

        assert settings.sqlalchemy_database_url == "postgresql+asyncpg://u:p@h/d"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="qa")

    def test_development_secret_rejected_in_production(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production", jwt_secret=DEVELOPMENT_JWT_SECRET)

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, jwt_secret="too-short")

    def test_production_with_strong_secret(self):
        settings = Settings(_env_file=None, environment="production", jwt_secret="x" * 40)

        assert settings.is_production
