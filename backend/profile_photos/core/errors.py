# 사진 서비스 예외 — 라우터에서 HTTP 상태로 매핑


class PhotoStorageError(IOError):
    # 드라이버/스트림 I/O 실패 (500)
    pass


class PhotoNotFound(LookupError):
    # 해당 사용자 사진 없음 (404)
    def __init__(self, user_id: int):
        super().__init__(f"no photo for user {user_id}")
        self.user_id = user_id


class PhotoInvariantError(AssertionError):
    # 사용자당 blob 0~1개 불변식 위반 — 복구 대상 아님
    pass


class InvalidMediaType(ValueError):
    # 업로드 Content-Type 누락/형식 오류 (400)
    pass
