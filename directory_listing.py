"""
HTML 디렉토리 리스팅
"""

import os
from html import escape
from typing import List, NamedTuple
from urllib.parse import quote, unquote

SIZE_UNITS = ["B", "KB", "MB", "GB"]


class DirectoryEntry(NamedTuple):
    name: str
    is_dir: bool
    size: int


def list_directory(directory_path) -> List[DirectoryEntry]:
    """바로 아래 항목만 읽음 (디렉토리 먼저, 이름순)"""
    entries = []
    with os.scandir(directory_path) as it:
        for item in it:
            try:
                stat = item.stat()
            except FileNotFoundError:
                # 깨진 심볼릭 링크는 링크 자체의 정보 사용
                if not item.is_symlink():
                    raise
                stat = item.stat(follow_symlinks=False)
            is_dir = item.is_dir()
            entries.append(DirectoryEntry(item.name, is_dir, stat.st_size))

    entries.sort(key=lambda entry: (not entry.is_dir, entry.name))
    return entries


def format_file_size(size: int) -> str:
    """사람이 읽기 쉬운 크기 (1024 단위, 소수점 두 자리)"""
    if size == 0:
        return "0 B"
    unit = min((size.bit_length() - 1) // 10, len(SIZE_UNITS) - 1)
    return f"{size / (1024 ** unit):.2f} {SIZE_UNITS[unit]}"


def display_name(name: str) -> str:
    """UTF-8이 아닌 파일명은 깨진 문자로 표시"""
    return os.fsencode(name).decode("utf-8", "replace")


def render_directory_html(request_path: str, entries: List[DirectoryEntry]) -> str:
    # 앞의 '/'를 하나로 합쳐 //host 형태의 링크가 생기지 않게 함
    base_href = "/" + request_path.lstrip("/\\")
    if not base_href.endswith("/"):
        base_href += "/"
    display_path = escape(unquote(request_path))

    items = []
    for entry in entries:
        suffix = "/" if entry.is_dir else ""
        href = escape(base_href + quote(os.fsencode(entry.name), safe="") + suffix)
        size = "-" if entry.is_dir else format_file_size(entry.size)
        css_class = "directory" if entry.is_dir else "file"
        items.append(
            f'        <li><a href="{href}" class="{css_class}">{escape(display_name(entry.name))}{suffix}</a>'
            f' <span class="size">{size}</span></li>\n'
        )
    items_html = "".join(items)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Index of {display_path}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        .directory {{ color: #1e90ff; }}
        .file {{ color: #333; }}
        .size {{ float: right; color: #666; font-size: 0.9em; }}
        ul {{ list-style-type: none; padding-left: 0; }}
        li {{ padding: 5px 0; }}
        a {{ text-decoration: none; }}
        a:hover {{ text-decoration: underline; }}
    </style>
</head>
<body>
    <h1>Index of {display_path}</h1>
    <hr>
    <ul>
{items_html}    </ul>
    <hr>
</body>
</html>"""
