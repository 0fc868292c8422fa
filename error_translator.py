"""
파일시스템/검증 오류를 HTTP 상태 코드와 짧은 텍스트 본문으로 변환
"""

import errno
import logging

from fastapi import FastAPI, HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import PlainTextResponse

logger = logging.getLogger("uvicorn.error")


class NotFound(HTTPException):
    def __init__(self):
        super().__init__(status_code=404, detail="File not found")


class PermissionDenied(HTTPException):
    def __init__(self):
        super().__init__(status_code=403, detail="Permission denied")


class Forbidden(HTTPException):
    """루트 밖으로 벗어나는 경로"""

    def __init__(self):
        super().__init__(status_code=403, detail="Forbidden")


class RangeNotSatisfiable(HTTPException):
    def __init__(self, file_size: int):
        super().__init__(
            status_code=416,
            detail="Range Not Satisfiable",
            headers={"Content-Range": f"bytes */{file_size}"},
        )
        self.file_size = file_size


class InternalError(HTTPException):
    def __init__(self):
        super().__init__(status_code=500, detail="Internal server error")


NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR}
PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM}


def error_from_os_error(exc: OSError) -> HTTPException:
    """OSError의 errno에 맞는 HTTP 오류 선택"""
    if exc.errno in NOT_FOUND_ERRNOS:
        return NotFound()
    if exc.errno in PERMISSION_ERRNOS:
        return PermissionDenied()
    return InternalError()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    cause = exc.__cause__
    if exc.status_code >= 500:
        logger.error(
            "%s %s -> %d %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
            exc_info=cause,
        )
    else:
        logger.warning(
            "%s %s -> %d %s%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.detail,
            f" ({cause!r})" if cause else "",
        )
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    # 응답 후 ServerErrorMiddleware가 다시 raise하므로 트레이스백은 uvicorn이 기록
    logger.error(
        "%s %s -> 500 unhandled %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc,
    )
    return PlainTextResponse("Internal server error", status_code=500)


def install_error_handlers(app: FastAPI):
    """모든 오류 응답을 text/plain으로 통일"""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
