# 공용 의존성 — PhotoService 조립 (저장소 백엔드는 설정으로 선택)
from functools import lru_cache

from profile_photos.core.config import settings
from profile_photos.db.init import get_db
from profile_photos.services.photos import PhotoService
from profile_photos.storage.gridfs_store import GridFSBlobStore
from profile_photos.storage.memory import MemoryBlobStore, MemoryPhotoRecordStore
from profile_photos.storage.mongo_records import MongoPhotoRecordStore


@lru_cache(maxsize=1)
def _memory_service() -> PhotoService:
    # 프로세스 수명 동안 같은 인메모리 저장소 공유
    return PhotoService(MemoryBlobStore(), MemoryPhotoRecordStore())


def uses_memory_backend() -> bool:
    return settings.STORAGE_BACKEND.lower() == "memory"


def get_photo_service() -> PhotoService:
    if uses_memory_backend():
        return _memory_service()
    db = get_db()
    return PhotoService(
        GridFSBlobStore.from_db(db, settings.GRIDFS_BUCKET),
        MongoPhotoRecordStore(db[settings.PHOTO_COLLECTION]),
    )
