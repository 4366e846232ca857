# profile_photos/storage/mongo_records.py
# 사진 메타 레코드 저장소 — motor 컬렉션 (기본 "photo")

from __future__ import annotations
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from profile_photos.core.errors import PhotoStorageError
from profile_photos.db.models.photo import Photo


def _from_doc(doc: Dict[str, Any]) -> Photo:
    return Photo(id=str(doc["_id"]), userId=doc["userId"], contentType=doc["contentType"])


class MongoPhotoRecordStore:
    def __init__(self, coll: AsyncIOMotorCollection):
        self.coll = coll

    async def save(self, record: Photo) -> Photo:
        # userId 기준 upsert → 사용자당 1건 유지
        try:
            doc = await self.coll.find_one_and_update(
                {"userId": record.user_id},
                {"$set": record.to_record()},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise PhotoStorageError(f"record save failed for user {record.user_id}: {e}") from e
        return _from_doc(doc)

    async def find_by_user_id(self, user_id: int) -> Optional[Photo]:
        try:
            doc = await self.coll.find_one({"userId": user_id})
        except PyMongoError as e:
            raise PhotoStorageError(f"record lookup failed for user {user_id}: {e}") from e
        return _from_doc(doc) if doc else None

    async def all_user_ids(self) -> List[int]:
        try:
            ids = await self.coll.distinct("userId")
        except PyMongoError as e:
            raise PhotoStorageError(f"record listing failed: {e}") from e
        return sorted(int(i) for i in ids)
