# profile_photos/scripts/check_photos.py
# 사진 저장소 정합성 점검 (쓰기가 트랜잭션이 아니라 어긋날 수 있음)
# 사용: python -m profile_photos.scripts.check_photos [--fix]
# - 사용자당 blob 2개 이상 → --fix 시 최신 1개만 남김
# - blob은 있는데 레코드 없음/타입 불일치 → --fix 시 blob 메타로 레코드 저장
# - 레코드는 있는데 blob 없음 → 보고만 (복구할 바이트가 없음)

import argparse
import asyncio
import logging
from typing import Any, Dict, List

from profile_photos.core.config import settings
from profile_photos.db.init import close_db, init_db
from profile_photos.db.models.photo import Photo, StoredBlob
from profile_photos.services.photos import PhotoService
from profile_photos.storage.base import BlobStore, RecordStore
from profile_photos.storage.gridfs_store import GridFSBlobStore
from profile_photos.storage.mongo_records import MongoPhotoRecordStore

log = logging.getLogger(__name__)


def _user_id(filename: str):
    try:
        return int(filename)
    except ValueError:
        return None


async def check(blobs: BlobStore, records: RecordStore, fix: bool = False) -> Dict[str, Any]:
    service = PhotoService(blobs, records)
    report: Dict[str, Any] = {
        "checked": 0,
        "duplicates": {},       # user_id → blob 개수
        "orphan_blobs": [],     # 레코드 없는 user_id
        "type_mismatch": [],    # 레코드 contentType ≠ blob contentType
        "missing_blobs": [],    # blob 없는 user_id
        "foreign": [],          # 숫자가 아닌 filename
        "fixed": 0,
    }

    seen: List[int] = []
    for filename in await blobs.filenames():
        user_id = _user_id(filename)
        if user_id is None:
            report["foreign"].append(filename)
            continue
        seen.append(user_id)
        report["checked"] += 1

        found: List[StoredBlob] = await blobs.find(filename)
        if len(found) > 1:
            report["duplicates"][user_id] = len(found)
            if fix:
                await service.sweep(user_id)
                report["fixed"] += 1
                found = await blobs.find(filename)
        if not found:
            continue

        newest = max(found, key=StoredBlob.order_key)
        blob_type = newest.metadata.get("contentType")
        record = await records.find_by_user_id(user_id)
        if record is None:
            report["orphan_blobs"].append(user_id)
        elif blob_type and record.content_type != blob_type:
            report["type_mismatch"].append(user_id)
        else:
            continue
        if fix and blob_type:
            await records.save(Photo(userId=user_id, contentType=blob_type))
            report["fixed"] += 1

    seen_ids = set(seen)
    report["missing_blobs"] = [u for u in await records.all_user_ids() if u not in seen_ids]
    return report


async def main(fix: bool = False) -> Dict[str, Any]:
    db = await init_db()
    try:
        report = await check(
            GridFSBlobStore.from_db(db, settings.GRIDFS_BUCKET),
            MongoPhotoRecordStore(db[settings.PHOTO_COLLECTION]),
            fix=fix,
        )
    finally:
        await close_db()

    print(
        f"checked: {report['checked']}, duplicates: {len(report['duplicates'])}, "
        f"orphan blobs: {len(report['orphan_blobs'])}, type mismatch: {len(report['type_mismatch'])}, "
        f"missing blobs: {len(report['missing_blobs'])}, fixed: {report['fixed']}"
    )
    for user_id, n in list(report["duplicates"].items())[:20]:
        print("- duplicate", user_id, "=>", n, "blobs")
    for user_id in report["missing_blobs"][:20]:
        print("- missing blob", user_id)
    for name in report["foreign"][:20]:
        print("- foreign file", name)
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="photo storage consistency check")
    parser.add_argument("--fix", action="store_true", help="repair duplicates and records")
    args = parser.parse_args()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    asyncio.run(main(fix=args.fix))
