# 환경변수 로딩 (.env)
from typing import List

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "fs"
    GRIDFS_BUCKET: str = "fs"
    PHOTO_COLLECTION: str = "photo"

    # "mongo" | "memory" (memory는 로컬 개발/테스트용)
    STORAGE_BACKEND: str = "mongo"

    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10MB
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
