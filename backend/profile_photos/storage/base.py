# profile_photos/storage/base.py
# 저장소 포트 — PhotoService는 이 두 인터페이스만 안다 (Mongo/메모리 구현 교체 가능)

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Protocol

from profile_photos.db.models.photo import Photo, StoredBlob


class BlobStore(Protocol):
    """파일명 + 메타데이터로 찾는 바이너리 저장소 (GridFS 류)."""

    async def find(self, filename: str) -> List[StoredBlob]:
        ...

    async def read(self, blob: StoredBlob) -> bytes:
        ...

    async def store(self, filename: str, metadata: Dict[str, Any], data: bytes) -> Any:
        """저장 후 새 blob id 반환."""
        ...

    async def delete(self, criteria: Mapping[str, Any]) -> int:
        """criteria(`_id` / `filename` / `metadata` 일치)에 맞는 blob 삭제, 삭제 건수 반환."""
        ...

    async def filenames(self) -> List[str]:
        ...


class RecordStore(Protocol):
    """사용자당 1건의 사진 메타 레코드 저장소."""

    async def save(self, record: Photo) -> Photo:
        """userId 기준 upsert, id가 채워진 레코드 반환."""
        ...

    async def find_by_user_id(self, user_id: int) -> Optional[Photo]:
        ...

    async def all_user_ids(self) -> List[int]:
        ...
