#!/usr/bin/env python3
"""
FastAPI 기반 Range 요청 지원 정적 파일 서버
HTML 디렉토리 리스팅, 단일 Range 요청, 경로 순회 차단
"""

import argparse
import mimetypes
import os
import stat
from pathlib import Path
from urllib.parse import quote

import anyio
import anyio.to_thread
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import HTMLResponse, StreamingResponse

from directory_listing import list_directory, render_directory_html
from error_translator import error_from_os_error, install_error_handlers
from path_resolver import resolve_request_path
from range_parser import ByteRange, parse_range_header
from server_config import DEFAULT_ADDRESS, DEFAULT_ROOT, ConfigError, RootContext, load_context

CHUNK_SIZE = 64 * 1024


class FileRangeResponse(StreamingResponse):
    """열린 파일의 [start, end] 구간을 청크 단위로 전송

    send()가 전송을 기다리는 동안 다음 청크를 읽지 않으므로 느린 클라이언트는
    디스크 읽기도 멈춘다. 응답이 어떻게 끝나든 파일은 닫힌다.
    """

    def __init__(self, file, byte_range: ByteRange, status_code: int = 200, headers=None,
                 chunk_size: int = CHUNK_SIZE):
        self.file = file
        self.byte_range = byte_range
        self.chunk_size = chunk_size
        super().__init__(self.read_range(), status_code=status_code, headers=headers)

    async def read_range(self):
        await self.file.seek(self.byte_range.start)
        remaining = self.byte_range.length
        while remaining > 0:
            chunk = await self.file.read(min(self.chunk_size, remaining))
            if not chunk:
                break
            yield chunk
            remaining -= len(chunk)

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        finally:
            # 클라이언트 연결이 끊기거나 취소되어도 파일 핸들 반납
            await self.body_iterator.aclose()
            await self.file.aclose()


def get_raw_path(request: Request) -> str:
    """디코딩 전의 요청 경로 (쿼리 제외)"""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return quote(request.scope["path"])


async def serve_file(request: Request, file_path: Path, file_size: int):
    """파일 전체 또는 Range 구간 스트리밍"""
    media_type = mimetypes.guess_type(str(file_path))[0] or "application/octet-stream"
    headers = {"Content-Type": media_type, "Accept-Ranges": "bytes"}
    range_header = request.headers.get("range")

    if range_header:
        byte_range = parse_range_header(range_header, file_size)
        status_code = 206
        headers["Content-Range"] = byte_range.content_range(file_size)
    else:
        byte_range = ByteRange(0, file_size - 1)
        status_code = 200
    headers["Content-Length"] = str(byte_range.length)

    file = await anyio.open_file(file_path, "rb")
    return FileRangeResponse(file, byte_range, status_code=status_code, headers=headers)


async def serve_directory_listing(directory_path: Path, raw_path: str):
    entries = await anyio.to_thread.run_sync(list_directory, directory_path)
    return HTMLResponse(render_directory_html(raw_path, entries))


def create_app(context: RootContext, cors: bool = False) -> FastAPI:
    # docs/openapi 경로가 같은 이름의 파일을 가리지 않도록 비활성화
    app = FastAPI(
        title="Range File Server",
        description="Range 요청 지원 정적 파일 서버",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    if cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET"],
            allow_headers=["Range"],
            expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
        )

    install_error_handlers(app)

    @app.get("/{path:path}")
    async def serve_path(request: Request, path: str = ""):
        """파일 또는 디렉토리 서빙"""
        root = request.app.state.context.root
        raw_path = get_raw_path(request)

        # 루트 밖이면 stat 전에 Forbidden
        file_path = await anyio.to_thread.run_sync(resolve_request_path, root, raw_path)

        try:
            file_stat = await anyio.to_thread.run_sync(os.stat, file_path)
            if stat.S_ISDIR(file_stat.st_mode):
                return await serve_directory_listing(file_path, raw_path)
            return await serve_file(request, file_path, file_stat.st_size)
        except OSError as exc:
            raise error_from_os_error(exc) from exc

    return app


def run_server(context: RootContext, cors: bool = False, log_level: str = "info"):
    """서버 실행"""
    app = create_app(context, cors=cors)

    print("Range File Server")
    print(f"Serving directory: {context.root}")
    print(f"Server URL: {context.url}")
    print("Features:")
    print("  - Single byte-range requests (Range: bytes=<start>-[<end>])")
    print("  - HTML directory browsing")
    if cors:
        print("  - CORS enabled")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=context.host, port=context.port, log_level=log_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Static file server with HTTP Range support")
    parser.add_argument(
        "address", nargs="?",
        help=f"ip:port to bind (default: {DEFAULT_ADDRESS})",
    )
    parser.add_argument(
        "root", nargs="?",
        help=f"Directory to serve (default: current directory, or {DEFAULT_ROOT} without an address)",
    )
    parser.add_argument("--cors", action="store_true", help="Allow cross-origin GET and Range requests")
    parser.add_argument(
        "--log-level", default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="uvicorn log level",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    address = args.address or DEFAULT_ADDRESS
    directory = args.root or (os.getcwd() if args.address else DEFAULT_ROOT)
    try:
        context = load_context(address, directory)
    except ConfigError as e:
        parser.error(str(e))

    run_server(context, cors=args.cors, log_level=args.log_level)


if __name__ == "__main__":
    main()
