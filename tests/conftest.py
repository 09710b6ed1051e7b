"""
Shared fixtures: in-memory database, recording uploader and mail stubs.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="tsdc-uploads-")
os.environ["EMAIL_HOST"] = ""
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["PUBLIC_BASE_URL"] = ""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from council_portal.database import Base, get_db
from council_portal.main import app
from council_portal.models import Nationality, RegistrationCategory, User
from council_portal.services.storage_service import DocumentStorage, StorageError, get_storage
from council_portal.utils.hash import hash_password
from council_portal.utils.jwt_handler import create_access_token

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingUploader:
    """Stands in for the Cloudinary uploader and remembers every call."""

    def __init__(self, fail_on_field=None):
        self.calls = []
        self.fail_on_field = fail_on_field

    async def upload(self, content: bytes, filename: str, folder: str) -> str:
        if self.fail_on_field and self.fail_on_field in filename:
            raise StorageError(f"Upload of {filename} failed with status 502")
        self.calls.append({"filename": filename, "folder": folder, "size": len(content)})
        return f"https://res.cloudinary.test/raw/upload/{folder}/{filename}"


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def reference_data(db_session):
    nationality = Nationality(name="Natural born Indian Citizen")
    category = RegistrationCategory(name="Permanent Registration (BDS)")
    db_session.add_all([nationality, category])
    db_session.commit()
    return {"nationality_id": nationality.id, "regcategory_id": category.id}


@pytest.fixture
def uploader():
    return RecordingUploader()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def storage(upload_dir, uploader):
    return DocumentStorage(upload_dir, uploader)


@pytest.fixture
def mock_welcome_email():
    with patch("council_portal.routes.users.send_welcome_email", new_callable=AsyncMock) as mock_email:
        mock_email.return_value = True
        yield mock_email


@pytest.fixture
def mock_reset_email():
    with patch("council_portal.services.auth_service.send_password_reset_email", new_callable=AsyncMock) as mock_email:
        mock_email.return_value = True
        yield mock_email


@pytest.fixture
def client(db_session, storage, mock_welcome_email, mock_reset_email):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def registration_fields(reference_data):
    return {
        "nationality_id": str(reference_data["nationality_id"]),
        "regcategory_id": str(reference_data["regcategory_id"]),
        "email": "ravi.kumar@example.com",
        "mobile_number": "9876543210",
        "password": "S3cure-pass",
        "f_name": "Ravi",
        "m_name": "Teja",
        "l_name": "Kumar",
        "father_name": "Suresh Kumar",
        "mother_name": "Lakshmi Kumar",
        "place": "Hyderabad",
        "dob": "1994-06-12",
        "category": "OC",
        "address": "12-3-45, Banjara Hills, Hyderabad",
        "pan_number": "ABCDE1234F",
        "aadhaar_number": "123412341234",
        "regtype": "permanent",
        "bds_qualification_year": "04/2020",
    }


@pytest.fixture
def make_user(db_session, reference_data):
    def _make_user(**overrides) -> User:
        values = {
            "nationality_id": reference_data["nationality_id"],
            "regcategory_id": reference_data["regcategory_id"],
            "email": "member@example.com",
            "mobile_number": "9000000001",
            "password_hash": hash_password("member-pass"),
            "f_name": "Anita",
            "l_name": "Rao",
            "father_name": "Prakash Rao",
            "mother_name": "Sita Rao",
            "place": "Warangal",
            "dob": date(1990, 1, 15),
            "category": "BC",
            "address": "Hanamkonda, Warangal",
            "pan_number": "PQRSX6789K",
            "aadhaar_number": "987698769876",
            "regtype": "permanent",
        }
        values.update(overrides)
        user = User(**values)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES
