"""
서버 시작 설정 (루트 디렉토리, 바인드 주소)
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_ADDRESS = "0.0.0.0:8080"
DEFAULT_ROOT = "./storage/"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RootContext:
    """프로세스 수명 동안 바뀌지 않는 서빙 설정"""

    root: Path
    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}/"


def _parse_number(text: str, upper: int, what: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise ConfigError(f"Invalid {what}: {text!r}")
    value = int(text)
    if value > upper:
        raise ConfigError(f"Invalid {what}: {text!r}")
    return value


def parse_address(address: str):
    """'ip:port' 형식 검사 후 (host, port) 반환"""
    parts = address.split(":")
    if len(parts) != 2:
        raise ConfigError(f"Invalid address: {address!r}")
    host, port_str = parts

    octets = host.split(".")
    if len(octets) != 4:
        raise ConfigError(f"Invalid ip: {host!r}")
    for octet in octets:
        _parse_number(octet, 255, "ip")

    port = _parse_number(port_str, 65535, "port")
    return host, port


def resolve_root(directory) -> Path:
    root = Path(directory).resolve()
    if not root.exists():
        raise ConfigError(f"Invalid path: {directory}")
    if not root.is_dir():
        raise ConfigError(f"Not a directory: {directory}")
    return root


def load_context(address: str = DEFAULT_ADDRESS, directory=DEFAULT_ROOT) -> RootContext:
    host, port = parse_address(address)
    return RootContext(root=resolve_root(directory), host=host, port=port)
