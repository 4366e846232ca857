# 컬렉션 인덱스 생성
# 앱 스타트업에서 한 번 ensure_indexes(db)를 await로 호출한다.

from __future__ import annotations
from typing import Dict, Any, List, Tuple

from profile_photos.core.config import settings


async def ensure_index(coll, name: str, keys: List[Tuple[str, int]], **options: Any) -> bool:
    """
    인덱스를 안전하게 보장한다.
    - 이미 있으면 재생성하지 않음
    - 스펙(unique/sparse)이 다르면 드롭 후 재생성
    생성(또는 재생성)했으면 True
    """
    # Motor는 index_information() 가 async
    existing: Dict[str, Dict[str, Any]] = await coll.index_information()

    if name in existing:
        idx = existing[name]  # 예: {'v':2,'key':[('userId',1)],'unique':True}
        need_unique = bool(options.get("unique", False))
        need_sparse = options.get("sparse", None)

        unique_ok = bool(idx.get("unique", False)) == need_unique
        sparse_ok = (need_sparse is None) or (bool(idx.get("sparse", False)) == bool(need_sparse))

        if unique_ok and sparse_ok:
            return False  # 이미 원하는 스펙
        await coll.drop_index(name)

    await coll.create_index(keys, name=name, **options)
    return True


async def ensure_indexes(db) -> None:
    # 사진 메타 레코드: 사용자당 1건
    await ensure_index(db[settings.PHOTO_COLLECTION], "userId_1", [("userId", 1)], unique=True)

    # GridFS files 컬렉션 (filename+uploadDate 인덱스는 GridFS가 직접 만든다)
    files = db[f"{settings.GRIDFS_BUCKET}.files"]
    await ensure_index(files, "metadata.userId_1", [("metadata.userId", 1)])
