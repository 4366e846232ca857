"""Pytest fixtures: in-memory stores wired into the FastAPI app."""

import itertools
import os

# 앱 import 전에 설정 — Mongo 없이 동작
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
from httpx import ASGITransport, AsyncClient

from profile_photos.core.deps import get_photo_service
from profile_photos.main import app
from profile_photos.services.photos import PhotoService
from profile_photos.storage.memory import MemoryBlobStore, MemoryPhotoRecordStore


@pytest.fixture
def clock():
    """Strictly increasing epoch-millis clock."""
    ticks = itertools.count(1_700_000_000_000)
    return lambda: next(ticks)


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def records() -> MemoryPhotoRecordStore:
    return MemoryPhotoRecordStore()


@pytest.fixture
def service(blobs, records, clock) -> PhotoService:
    return PhotoService(blobs, records, clock=clock)


@pytest.fixture
async def client(service) -> AsyncClient:
    """Async HTTP client against the app, photo service swapped for the in-memory one."""
    app.dependency_overrides[get_photo_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
