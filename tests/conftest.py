"""Pytest configuration and fixtures."""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from certstore.api.endpoints import get_certificate_service
from certstore.config import Settings
from certstore.exceptions import PersistenceError, UploadError
from certstore.main import app
from certstore.models import Certificate, CertificateFields
from certstore.services import CertificateService, StorageService
from certstore.services.storage import StorageBackend

BASE_URL = "https://project.supabase.co"


class RecordingBackend(StorageBackend):
    """Storage backend that keeps objects in a dict."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.uploads: List[tuple] = []
        self.error: Optional[str] = None

    async def upload(self, file_data: bytes, key: str, content_type: str) -> str:
        if self.error:
            raise UploadError(self.error)
        self.uploads.append((key, content_type))
        self.objects[key] = file_data
        return key


class InMemoryRepository:
    """Certificates table kept in memory, following the SQL statements."""

    def __init__(self):
        self.rows: Dict[int, dict] = {}
        self.next_id = 1
        self.error: Optional[str] = None
        self.statements: List[str] = []

    def _check(self, statement: str):
        self.statements.append(statement)
        if self.error:
            raise PersistenceError(self.error)

    async def insert(self, fields: CertificateFields, image_url: str) -> Certificate:
        self._check("insert")
        row = {"id": self.next_id, **fields.model_dump(), "image": image_url}
        self.rows[self.next_id] = row
        self.next_id += 1
        return Certificate(**row)

    async def list_all(self) -> List[Certificate]:
        self._check("list_all")
        return [Certificate(**row) for row in self.rows.values()]

    async def get(self, certificate_id: int) -> Optional[Certificate]:
        self._check("get")
        row = self.rows.get(certificate_id)
        return Certificate(**row) if row else None

    async def update(self, certificate_id, fields, image_url=None):
        self._check("update")
        row = self.rows.get(certificate_id)
        if row is None:
            return None
        row.update(fields.model_dump())
        if image_url is not None:
            row["image"] = image_url
        return Certificate(**row)

    async def delete(self, certificate_id: int) -> Optional[Certificate]:
        self._check("delete")
        row = self.rows.pop(certificate_id, None)
        return Certificate(**row) if row else None

    async def list_by_provider(self, provider: str) -> List[Certificate]:
        self._check("list_by_provider")
        return [Certificate(**row) for row in self.rows.values() if row["provider"] == provider]

    async def list_by_date(self, newest_first: bool = False) -> List[Certificate]:
        self._check("list_by_date")
        by_id = sorted(self.rows.values(), key=lambda row: row["id"])
        dated = sorted(
            (row for row in by_id if row["date"]),
            key=lambda row: row["date"],
            reverse=newest_first,
        )
        undated = [row for row in by_id if not row["date"]]
        return [Certificate(**row) for row in dated + undated]


@pytest.fixture
def storage_backend():
    """Object store fake."""
    return RecordingBackend()


@pytest.fixture
def repository():
    """Relational store fake."""
    return InMemoryRepository()


@pytest.fixture
def storage_service(storage_backend):
    """Storage service pointed at a Supabase-style base URL."""
    config = Settings(storage_base_url=BASE_URL, storage_backend="local")
    return StorageService(backend=storage_backend, config=config)


@pytest.fixture
def certificate_service(storage_service, repository):
    """Certificate service wired to the fakes."""
    return CertificateService(storage_service, repository)


@pytest.fixture
def client(certificate_service):
    """Create a test client for the FastAPI app."""
    app.dependency_overrides[get_certificate_service] = lambda: certificate_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_image():
    """Multipart file tuple for the image part."""
    return ("aws.png", b"\x89PNG\r\n\x1a\nfake-image", "image/png")
