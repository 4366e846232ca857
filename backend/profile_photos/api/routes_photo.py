# profile_photos/api/routes_photo.py
# 사용자 프로필 사진 업로드/다운로드
# GET  /users/{user}/photo → 원본 바이트 + 저장된 Content-Type
# POST /users/{user}/photo → multipart "file" 저장, 201 + Location

from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile

from profile_photos.core.config import settings
from profile_photos.core.deps import get_photo_service
from profile_photos.core.errors import (
    InvalidMediaType,
    PhotoInvariantError,
    PhotoNotFound,
    PhotoStorageError,
)
from profile_photos.services.photos import PhotoService, parse_media_type

log = logging.getLogger(__name__)

PHOTO_URI = "/users/{user}/photo"

router = APIRouter(tags=["photo"])


@router.get(PHOTO_URI, name="read_photo")
async def read_photo(user: int, service: PhotoService = Depends(get_photo_service)):
    """
    저장된 사진을 그대로 돌려준다
    """
    try:
        photo = await service.read_photo(user)
    except PhotoNotFound:
        raise HTTPException(status_code=404, detail=f"no photo for user {user}")
    except PhotoInvariantError as e:
        log.error("photo invariant broken: %s", e)
        raise HTTPException(status_code=500, detail="사진 데이터가 손상되었습니다")
    except PhotoStorageError as e:
        log.error("photo read failed for user %s: %s", user, e, exc_info=True)
        raise HTTPException(status_code=500, detail="사진 조회 중 오류가 발생했습니다")

    # media_type을 쓰면 text/* 에 charset이 붙음 → 저장된 값 그대로 헤더로
    return Response(content=photo.photo, headers={"Content-Type": photo.content_type})


@router.post(PHOTO_URI, status_code=201, name="write_photo")
async def write_photo(
    user: int,
    request: Request,
    file: UploadFile = File(...),
    service: PhotoService = Depends(get_photo_service),
):
    """
    사진 업로드 — 이전 사진은 삭제되고 새 사진으로 교체
    """
    try:
        content_type = parse_media_type(file.content_type)
    except InvalidMediaType as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        data = await file.read()
    except OSError as e:
        log.error("upload read failed for user %s: %s", user, e, exc_info=True)
        raise HTTPException(status_code=500, detail="파일 읽기 중 오류가 발생했습니다")

    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"파일 크기는 {settings.MAX_UPLOAD_BYTES} 바이트 이하여야 합니다",
        )

    try:
        await service.write_photo(user, content_type, data)
    except PhotoStorageError as e:
        log.error("photo write failed for user %s: %s", user, e, exc_info=True)
        raise HTTPException(status_code=500, detail="사진 저장 중 오류가 발생했습니다")

    location = str(request.url_for("read_photo", user=str(user)))
    return Response(status_code=201, headers={"Location": location})
