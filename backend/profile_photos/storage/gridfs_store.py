# profile_photos/storage/gridfs_store.py
# GridFS 기반 BlobStore — motor AsyncIOMotorGridFSBucket 사용
# 드라이버 예외는 전부 PhotoStorageError로 감싸서 올린다

from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping

from gridfs.errors import GridFSError, NoFile
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from profile_photos.core.errors import PhotoStorageError
from profile_photos.db.models.photo import StoredBlob

log = logging.getLogger(__name__)


def _to_blob(grid_out) -> StoredBlob:
    return StoredBlob(
        id=grid_out._id,
        filename=grid_out.filename,
        metadata=dict(grid_out.metadata or {}),
        length=grid_out.length or 0,
    )


class GridFSBlobStore:
    def __init__(self, bucket: AsyncIOMotorGridFSBucket):
        self.bucket = bucket

    @classmethod
    def from_db(cls, db: AsyncIOMotorDatabase, bucket_name: str = "fs") -> "GridFSBlobStore":
        return cls(AsyncIOMotorGridFSBucket(db, bucket_name=bucket_name))

    async def _find(self, criteria: Mapping[str, Any]) -> List[StoredBlob]:
        blobs: List[StoredBlob] = []
        try:
            cursor = self.bucket.find(dict(criteria))
            async for grid_out in cursor:
                blobs.append(_to_blob(grid_out))
        except (PyMongoError, GridFSError) as e:
            raise PhotoStorageError(f"gridfs find failed: {e}") from e
        return blobs

    async def find(self, filename: str) -> List[StoredBlob]:
        return await self._find({"filename": filename})

    async def read(self, blob: StoredBlob) -> bytes:
        try:
            stream = await self.bucket.open_download_stream(blob.id)
            return await stream.read()
        except (PyMongoError, GridFSError) as e:
            raise PhotoStorageError(f"gridfs read failed for {blob.filename}: {e}") from e

    async def store(self, filename: str, metadata: Dict[str, Any], data: bytes) -> Any:
        try:
            return await self.bucket.upload_from_stream(filename, data, metadata=metadata)
        except (PyMongoError, GridFSError) as e:
            raise PhotoStorageError(f"gridfs store failed for {filename}: {e}") from e

    async def delete(self, criteria: Mapping[str, Any]) -> int:
        deleted = 0
        for blob in await self._find(criteria):
            try:
                await self.bucket.delete(blob.id)
                deleted += 1
            except NoFile:
                # 동시 삭제로 이미 없어진 경우
                log.debug("blob %s already gone", blob.id)
            except (PyMongoError, GridFSError) as e:
                raise PhotoStorageError(f"gridfs delete failed for {blob.filename}: {e}") from e
        return deleted

    async def filenames(self) -> List[str]:
        return sorted({b.filename for b in await self._find({})})
