"""Storage consistency check and repair."""

from profile_photos.db.models.photo import Photo
from profile_photos.scripts.check_photos import check
from profile_photos.storage.memory import MemoryBlobStore, MemoryPhotoRecordStore


async def _seed():
    blobs, records = MemoryBlobStore(), MemoryPhotoRecordStore()
    # 정상
    await blobs.store("1", {"userId": 1, "when": 1, "contentType": "image/png"}, b"ok")
    await records.save(Photo(userId=1, contentType="image/png"))
    # 중복 blob
    await blobs.store("2", {"userId": 2, "when": 1, "contentType": "image/png"}, b"old")
    await blobs.store("2", {"userId": 2, "when": 5, "contentType": "image/jpeg"}, b"new")
    await records.save(Photo(userId=2, contentType="image/png"))
    # 레코드 없는 blob
    await blobs.store("3", {"userId": 3, "when": 1, "contentType": "image/gif"}, b"gif")
    # blob 없는 레코드
    await records.save(Photo(userId=4, contentType="image/png"))
    # 사용자 파일이 아님
    await blobs.store("readme", {}, b"?")
    return blobs, records


async def test_check_reports_problems_without_changes() -> None:
    blobs, records = await _seed()

    report = await check(blobs, records)

    assert report["checked"] == 3
    assert report["duplicates"] == {2: 2}
    assert report["type_mismatch"] == [2]
    assert report["orphan_blobs"] == [3]
    assert report["missing_blobs"] == [4]
    assert report["foreign"] == ["readme"]
    assert report["fixed"] == 0
    assert len(await blobs.find("2")) == 2
    assert await records.find_by_user_id(3) is None


async def test_check_fix_repairs_duplicates_and_records() -> None:
    blobs, records = await _seed()

    report = await check(blobs, records, fix=True)

    assert report["fixed"] == 3
    (kept,) = await blobs.find("2")
    assert await blobs.read(kept) == b"new"
    assert (await records.find_by_user_id(2)).content_type == "image/jpeg"
    assert (await records.find_by_user_id(3)).content_type == "image/gif"

    again = await check(blobs, records)
    assert again["duplicates"] == {}
    assert again["orphan_blobs"] == [] and again["type_mismatch"] == []
    assert again["missing_blobs"] == [4]
