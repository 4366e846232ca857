# profile_photos/db/models/photo.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

class Photo(BaseModel):
    # 저장소에는 camelCase(userId/contentType)로 기록 → alias 허용
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None                  # 저장 시 부여 (ObjectId 문자열)
    user_id: int = Field(alias="userId")
    content_type: str = Field(alias="contentType")
    photo: Optional[bytes] = None             # 조회 결과에만 존재, 레코드에는 저장 안 함

    def to_record(self) -> Dict[str, Any]:
        return {"userId": self.user_id, "contentType": self.content_type}

    def __repr__(self) -> str:
        size = len(self.photo) if self.photo is not None else None
        return f"Photo(user_id={self.user_id}, content_type={self.content_type!r}, bytes={size})"

class StoredBlob(BaseModel):
    # BlobStore.find 결과 한 건 (바이트는 read()로 따로 읽음)
    id: Any
    filename: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    length: int = 0

    def order_key(self):
        # 최신 판정 기준: (metadata.when, id), id는 저장소 고유 타입(ObjectId/int) 그대로 비교
        return (int(self.metadata.get("when") or 0), self.id)
