# profile_photos/storage/memory.py
# 인메모리 저장소 — Mongo 없이 로컬 개발/테스트 (STORAGE_BACKEND=memory)

from __future__ import annotations
import itertools
from typing import Any, Dict, List, Mapping, Optional

from profile_photos.db.models.photo import Photo, StoredBlob


class MemoryBlobStore:
    def __init__(self):
        self._blobs: Dict[int, StoredBlob] = {}
        self._data: Dict[int, bytes] = {}
        self._ids = itertools.count(1)

    @staticmethod
    def _matches(blob: StoredBlob, criteria: Mapping[str, Any]) -> bool:
        for key, value in criteria.items():
            if key == "_id":
                if blob.id != value:
                    return False
            elif key in ("filename", "metadata"):
                if getattr(blob, key) != value:
                    return False
            else:
                raise ValueError(f"unsupported criteria key: {key}")
        return True

    async def find(self, filename: str) -> List[StoredBlob]:
        return [b.model_copy(deep=True) for b in self._blobs.values() if b.filename == filename]

    async def read(self, blob: StoredBlob) -> bytes:
        return self._data[blob.id]

    async def store(self, filename: str, metadata: Dict[str, Any], data: bytes) -> Any:
        blob_id = next(self._ids)
        self._blobs[blob_id] = StoredBlob(id=blob_id, filename=filename, metadata=dict(metadata), length=len(data))
        self._data[blob_id] = bytes(data)
        return blob_id

    async def delete(self, criteria: Mapping[str, Any]) -> int:
        doomed = [i for i, b in self._blobs.items() if self._matches(b, criteria)]
        for i in doomed:
            del self._blobs[i]
            del self._data[i]
        return len(doomed)

    async def filenames(self) -> List[str]:
        return sorted({b.filename for b in self._blobs.values()})


class MemoryPhotoRecordStore:
    def __init__(self):
        self._records: Dict[int, Photo] = {}
        self._ids = itertools.count(1)

    async def save(self, record: Photo) -> Photo:
        prev = self._records.get(record.user_id)
        saved = Photo(
            id=prev.id if prev else str(next(self._ids)),
            userId=record.user_id,
            contentType=record.content_type,
        )
        self._records[record.user_id] = saved
        return saved.model_copy()

    async def find_by_user_id(self, user_id: int) -> Optional[Photo]:
        rec = self._records.get(user_id)
        return rec.model_copy() if rec else None

    async def all_user_ids(self) -> List[int]:
        return sorted(self._records)
