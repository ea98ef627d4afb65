import io
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-property-manager")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from property_manager.database import get_db
from property_manager.models.base import Base
from property_manager.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from property_manager.models.account import Account
from property_manager.models.user import User
from property_manager.models.property import Property
from property_manager.models.property_photo import PropertyPhoto
from property_manager.models.receipt import Receipt
from property_manager.models.expense import Expense
from property_manager.models.expense_category import ExpenseCategory
from property_manager.models.work_order import WorkOrder
from property_manager.models.outbox_event import OutboxEvent
from property_manager.repositories.expense_category_repository import ExpenseCategoryRepository
from property_manager.services.storage_service import (
    StorageService,
    PresignedUrl,
    ObjectInfo,
    get_storage_service,
)
from property_manager.services.notification_service import (
    ReceiptNotifier,
    ReceiptLinkedEvent,
    get_receipt_notifier,
)
from property_manager.core.exceptions import StorageException
# Import FastAPI app AFTER model imports
from property_manager.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_image_bytes(width: int = 800, height: int = 600, format: str = "PNG") -> bytes:
    """Render a small solid-color image"""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=(30, 120, 200)).save(buf, format=format)
    return buf.getvalue()


class InMemoryStorageService(StorageService):
    """StorageService keeping objects in a dict, with switches to simulate failures"""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []
        self.fail_deletes = False
        self.fail_puts = False

    def generate_presigned_upload_url(self, storage_key, content_type, file_size_bytes):
        return PresignedUrl(
            url=f"https://storage.test/{storage_key}?method=PUT",
            expires_at=datetime.now(UTC) + timedelta(minutes=settings.PRESIGNED_URL_EXPIRY_MINUTES),
        )

    def generate_presigned_download_url(self, storage_key):
        return f"https://storage.test/{storage_key}?method=GET"

    def stat_object(self, storage_key):
        if storage_key not in self.objects:
            return None
        data, content_type = self.objects[storage_key]
        return ObjectInfo(key=storage_key, size=len(data), content_type=content_type)

    def get_object(self, storage_key):
        if storage_key not in self.objects:
            raise StorageException("Failed to download object: NoSuchKey")
        return self.objects[storage_key][0]

    def put_object(self, storage_key, data, content_type):
        if self.fail_puts:
            raise StorageException("Failed to upload object: ServiceUnavailable")
        self.objects[storage_key] = (data, content_type)

    def delete_objects(self, storage_keys):
        if self.fail_deletes:
            raise StorageException("Failed to delete objects: ServiceUnavailable")
        for key in storage_keys:
            self.objects.pop(key, None)
            self.deleted.append(key)

    def simulate_upload(self, storage_key: str, data: bytes | None = None, content_type: str = "image/png"):
        """Stand-in for the client PUTting to the presigned URL"""
        self.objects[storage_key] = (data if data is not None else make_image_bytes(), content_type)


class RecordingNotifier(ReceiptNotifier):
    """Notifier that records delivered events, optionally failing every call"""

    def __init__(self):
        self.events: list[tuple] = []
        self.fail = False

    def notify_receipt_linked(self, account_id, event: ReceiptLinkedEvent):
        if self.fail:
            raise ConnectionError("notification hub unreachable")
        self.events.append((account_id, event))


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    """In-memory object storage"""
    return InMemoryStorageService()


@pytest.fixture
def notifier():
    """Notifier recording receipt events"""
    return RecordingNotifier()


@pytest.fixture(scope="function")
def client(db_session, storage, notifier):
    """FastAPI test client with test database, storage and notifier"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    app.dependency_overrides[get_receipt_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


@pytest.fixture
def mock_jwt_token():
    """Generate valid JWT token"""
    return create_test_token()


@pytest.fixture
def auth_headers(mock_jwt_token):
    """Authorization headers for authenticated requests"""
    return {"Authorization": f"Bearer {mock_jwt_token}"}


@pytest.fixture
def user_a_headers():
    """Authorization headers for user A"""
    token = create_test_token(user_id="user-a")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_b_headers():
    """Authorization headers for user B"""
    token = create_test_token(user_id="user-b")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def categories(db_session):
    """Seeded global expense categories"""
    ExpenseCategoryRepository(db_session).seed_defaults()
    return db_session.query(ExpenseCategory).order_by(ExpenseCategory.sort_order).all()


@pytest.fixture
def create_property(client):
    """Factory creating a property through the API, returns its ID"""

    def _create(headers, name="123 Main St"):
        response = client.post("/api/properties", headers=headers, json={"name": name, "city": "Austin"})
        assert response.status_code == 201
        return response.json()["id"]

    return _create


@pytest.fixture
def upload_photo(client, storage):
    """Factory running the full photo upload flow, returns the photo JSON"""

    def _upload(headers, property_id, file_name="front.png", content_type="image/png"):
        data = make_image_bytes()
        url_response = client.post(
            f"/api/properties/{property_id}/photos/upload-url",
            headers=headers,
            json={
                "content_type": content_type,
                "file_size_bytes": len(data),
                "original_file_name": file_name,
            },
        )
        assert url_response.status_code == 200
        keys = url_response.json()
        storage.simulate_upload(keys["storage_key"], data, content_type)

        response = client.post(
            f"/api/properties/{property_id}/photos",
            headers=headers,
            json={
                "storage_key": keys["storage_key"],
                "thumbnail_storage_key": keys["thumbnail_storage_key"],
                "content_type": content_type,
                "file_size_bytes": len(data),
                "original_file_name": file_name,
            },
        )
        assert response.status_code == 201
        return response.json()

    return _upload


@pytest.fixture
def upload_receipt(client, storage):
    """Factory running the full receipt upload flow, returns the receipt ID"""

    def _upload(headers, property_id=None, file_name="receipt.jpg", content_type="image/jpeg"):
        data = make_image_bytes(format="PDF" if content_type == "application/pdf" else "JPEG")
        url_response = client.post(
            "/api/receipts/upload-url",
            headers=headers,
            json={
                "content_type": content_type,
                "file_size_bytes": len(data),
                "original_file_name": file_name,
                "property_id": property_id,
            },
        )
        assert url_response.status_code == 200
        keys = url_response.json()
        storage.simulate_upload(keys["storage_key"], data, content_type)

        response = client.post(
            "/api/receipts",
            headers=headers,
            json={
                "storage_key": keys["storage_key"],
                "thumbnail_storage_key": keys["thumbnail_storage_key"],
                "original_file_name": file_name,
                "content_type": content_type,
                "file_size_bytes": len(data),
                "property_id": property_id,
            },
        )
        assert response.status_code == 201
        return response.json()["id"]

    return _upload
