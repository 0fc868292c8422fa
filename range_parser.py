"""
HTTP Range 헤더 파싱 (단일 범위 bytes=<start>-[<end>]만 지원)
"""

import re
from typing import NamedTuple

from error_translator import RangeNotSatisfiable

RANGE_PATTERN = re.compile(r"bytes=(\d+)-(\d*)", re.ASCII)


class ByteRange(NamedTuple):
    start: int
    end: int  # 포함

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, file_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{file_size}"


def parse_range_header(range_header: str, file_size: int) -> ByteRange:
    """Range 헤더 파싱

    다중 범위, suffix 범위(bytes=-500), 다른 단위는 잘못 해석하지 않고
    RangeNotSatisfiable로 거부한다.
    """
    match = RANGE_PATTERN.fullmatch(range_header.strip())
    if not match:
        raise RangeNotSatisfiable(file_size)

    start_str, end_str = match.groups()
    start = int(start_str)
    end = int(end_str) if end_str else file_size - 1

    # 0 <= start <= end < file_size
    if start >= file_size or end >= file_size or start > end:
        raise RangeNotSatisfiable(file_size)

    return ByteRange(start, end)
