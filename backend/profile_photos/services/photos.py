# profile_photos/services/photos.py
# 사용자 프로필 사진 쓰기/읽기 — 사용자당 blob 1개 유지
# - blob과 메타 레코드는 filename = str(userId)로만 연결 (트랜잭션 없음)
# - 쓰기 후 sweep으로 "가장 최신 blob 하나만" 남겨 동시 업로드에도 수렴

from __future__ import annotations
import logging
import re
from datetime import datetime, timezone
from typing import Callable, List, Optional

from profile_photos.core.errors import InvalidMediaType, PhotoInvariantError, PhotoNotFound
from profile_photos.db.models.photo import Photo, StoredBlob
from profile_photos.storage.base import BlobStore, RecordStore

log = logging.getLogger(__name__)

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE = re.compile(rf"^\s*({_TOKEN})/({_TOKEN})\s*((?:;.*)?)$")
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_PARAM = re.compile(rf"\s*;\s*({_TOKEN})=({_TOKEN}|{_QUOTED})\s*")


def parse_media_type(value: Optional[str]) -> str:
    """
    업로드 Content-Type 정규화: "Image/PNG; charset=x" → "image/png; charset=x"
    누락/형식 오류는 InvalidMediaType
    """
    if not value or not value.strip():
        raise InvalidMediaType("content type is missing")
    m = _MEDIA_TYPE.match(value)
    if not m:
        raise InvalidMediaType(f"invalid content type: {value!r}")
    main, sub, rest = m.group(1).lower(), m.group(2).lower(), m.group(3)
    # 파라미터는 token=token 또는 token="quoted;string"
    params = []
    pos = 0
    while pos < len(rest):
        pm = _PARAM.match(rest, pos)
        if not pm:
            raise InvalidMediaType(f"invalid content type parameter: {rest[pos:]!r}")
        params.append(f"{pm.group(1)}={pm.group(2)}")
        pos = pm.end()
    return "; ".join([f"{main}/{sub}", *params])


def _now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class PhotoService:
    def __init__(self, blobs: BlobStore, records: RecordStore, clock: Callable[[], int] = _now_millis):
        self.blobs = blobs
        self.records = records
        self.clock = clock

    async def _find(self, user_id: int) -> List[StoredBlob]:
        return await self.blobs.find(str(user_id))

    async def write_photo(self, user_id: int, content_type: str, data: bytes) -> Photo:
        filename = str(user_id)

        # 1) 기존 blob 삭제 (메타데이터 일치 기준)
        for blob in await self._find(user_id):
            await self.blobs.delete({"filename": filename, "metadata": blob.metadata})

        # 2) 새 blob 저장
        metadata = {"userId": user_id, "when": self.clock(), "contentType": content_type}
        await self.blobs.store(filename, metadata, data)

        # 3) 동시 업로드로 남은 blob 정리 → 최신 1개만
        await self.sweep(user_id)

        # 4) 메타 레코드 저장 (userId 기준 upsert)
        record = await self.records.save(Photo(userId=user_id, contentType=content_type))
        log.info("stored photo for user %s (%s, %d bytes)", user_id, content_type, len(data))
        return record

    async def sweep(self, user_id: int) -> int:
        """가장 최신 blob 외 전부 삭제, 삭제 건수 반환."""
        blobs = await self._find(user_id)
        if len(blobs) <= 1:
            return 0

        newest = max(blobs, key=StoredBlob.order_key)
        removed = 0
        for blob in blobs:
            if blob.id != newest.id:
                removed += await self.blobs.delete({"_id": blob.id})
        if removed:
            log.warning("user %s had %d extra photo blob(s), kept %s", user_id, removed, newest.id)
        return removed

    async def read_photo(self, user_id: int) -> Photo:
        blobs = await self._find(user_id)
        if len(blobs) > 1:
            raise PhotoInvariantError(f"there should be 0-1 photos for user {user_id}, found {len(blobs)}")
        if not blobs:
            raise PhotoNotFound(user_id)

        blob = blobs[0]
        data = await self.blobs.read(blob)
        content_type = blob.metadata.get("contentType") or "application/octet-stream"
        # 조회 결과의 id는 레코드 식별자 → blob 기준 조회라 비워 둠
        return Photo(userId=user_id, contentType=content_type, photo=data)
