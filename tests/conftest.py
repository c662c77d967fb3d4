"""
Test configuration and fixtures for the dealer listings API.
Provides an in-memory database per test, service fixtures, test data factories and an HTTP client.
"""

import io
import uuid
import pytest
from typing import AsyncGenerator, Dict, Any, Optional
from PIL import Image
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from dealer_listings.config import Settings
from dealer_listings.database import create_session_factory, create_tables
from dealer_listings.main import create_app
from dealer_listings.models.dealer import Dealer
from dealer_listings.models.property import Property
from dealer_listings.repositories.dealer import DealerRepository
from dealer_listings.repositories.property import PropertyRepository
from dealer_listings.services.auth import AuthService
from dealer_listings.services.property import PropertyService
from dealer_listings.utils.auth import TokenService, hash_password
from dealer_listings.utils.file_utils import FileStorage


TEST_JWT_SECRET = "test-signing-secret-0123456789abcdef0123456789"
TEST_PASSWORD = "testpassword123"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at an in-memory database and a temporary upload directory."""
    return Settings(
        environment="testing",
        database_url="sqlite+aiosqlite://",
        jwt_secret=TEST_JWT_SECRET,
        upload_dir=str(tmp_path / "uploads"),
        create_tables_on_startup=False,
    )


@pytest.fixture
async def engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with the schema created."""
    engine = create_async_engine(
        test_settings.sqlalchemy_database_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session


# Repository fixtures
@pytest.fixture
def dealer_repository(db_session: AsyncSession) -> DealerRepository:
    """Create a dealer repository instance."""
    return DealerRepository(db_session)


@pytest.fixture
def property_repository(db_session: AsyncSession) -> PropertyRepository:
    """Create a property repository instance."""
    return PropertyRepository(db_session)


# Service fixtures
@pytest.fixture
def token_service() -> TokenService:
    """Token service signing with the test secret."""
    return TokenService(secret_key=TEST_JWT_SECRET)


@pytest.fixture
def file_storage(test_settings: Settings) -> FileStorage:
    """Upload storage in the temporary upload directory."""
    return FileStorage(
        base_dir=test_settings.upload_dir,
        url_prefix=test_settings.upload_url_prefix,
        max_file_size=test_settings.max_file_size
    )


@pytest.fixture
def auth_service(db_session: AsyncSession, token_service: TokenService) -> AuthService:
    """Create an auth service instance."""
    return AuthService(db_session, token_service)


@pytest.fixture
def property_service(db_session: AsyncSession, file_storage: FileStorage) -> PropertyService:
    """Create a property service instance."""
    return PropertyService(db_session, file_storage)


# Application fixtures
@pytest.fixture
def app(test_settings: Settings, engine: AsyncEngine):
    """Application wired to the test database."""
    return create_app(settings=test_settings, engine=engine)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client talking to the application in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# Test data factories
class DealerFactory:
    """Factory for creating test dealers."""

    @staticmethod
    def create_dealer_data(
        name: str = "Test Dealer",
        email: Optional[str] = None,
        password: str = TEST_PASSWORD
    ) -> Dict[str, Any]:
        """Create registration data dictionary."""
        return {
            "name": name,
            "email": email or f"dealer{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
        }

    @staticmethod
    async def create_dealer(
        dealer_repo: DealerRepository,
        name: str = "Test Dealer",
        email: Optional[str] = None,
        password: str = TEST_PASSWORD
    ) -> Dealer:
        """Create a test dealer in the database."""
        data = DealerFactory.create_dealer_data(name=name, email=email, password=password)
        return await dealer_repo.create_dealer(
            data["name"],
            data["email"],
            hash_password(data["password"])
        )


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(**overrides) -> Dict[str, Any]:
        """Listing fields with flags as 0/1."""
        data = {
            "name": "Test Property",
            "location": "Test City",
            "bedrooms": 2,
            "bathrooms": 1,
            "kitchen": 1,
            "ac": 0,
            "wifi": 1,
            "parking": 0,
            "food": 0,
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_form_data(**overrides) -> Dict[str, str]:
        """Listing fields as multipart form values."""
        return {
            key: str(value)
            for key, value in PropertyFactory.create_property_data(**overrides).items()
        }

    @staticmethod
    async def create_property(
        property_repo: PropertyRepository,
        dealer_id: int,
        image: Optional[str] = None,
        **overrides
    ) -> Property:
        """Create a test property in the database."""
        return await property_repo.create_property(
            dealer_id,
            PropertyFactory.create_property_data(**overrides),
            image
        )


def make_image_bytes(image_format: str = "PNG", size=(16, 16)) -> bytes:
    """Encode a small solid-colour image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 120, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


def auth_headers(token: str) -> Dict[str, str]:
    """Authorization header for a bearer token."""
    return {"Authorization": f"Bearer {token}"}


async def register_dealer(client: AsyncClient, email: Optional[str] = None, name: str = "Test Dealer") -> str:
    """Register through the API and return the issued token."""
    response = await client.post(
        "/register",
        json=DealerFactory.create_dealer_data(name=name, email=email)
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def png_bytes() -> bytes:
    """A valid PNG image."""
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A valid JPEG image."""
    return make_image_bytes("JPEG")
