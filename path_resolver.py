"""
요청 경로를 루트 디렉토리 안의 실제 파일 경로로 변환
"""

from pathlib import Path
from urllib.parse import unquote

from error_translator import Forbidden


def resolve_request_path(root: Path, raw_path: str) -> Path:
    """퍼센트 디코딩 후 루트 기준으로 정규화, 루트 밖이면 Forbidden

    root는 이미 resolve()된 절대 경로여야 한다.
    """
    # UTF-8이 아닌 바이트는 파일시스템 이름 그대로 복원
    decoded = unquote(raw_path, errors="surrogateescape")
    if "\x00" in decoded:
        raise Forbidden()
    clean_path = decoded.lstrip("/")
    file_path = root / clean_path

    # 경로 순회 공격 방지: 문자열 접두사가 아니라 경로 구성요소로 비교
    try:
        file_path = file_path.resolve()
        file_path.relative_to(root)
    except (ValueError, OSError):
        raise Forbidden() from None

    return file_path
