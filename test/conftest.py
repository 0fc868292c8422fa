import pytest
from fastapi.testclient import TestClient

from generate_test_files import generate_test_file
from range_server import create_app
from server_config import RootContext

SPECIAL_NAME = "a<b>&\"c'.txt"


@pytest.fixture
def root_dir(tmp_path):
    """서빙 루트와 그 옆의 비슷한 이름의 형제 디렉토리"""
    root = tmp_path / "root"
    root.mkdir()
    (root / "hello.txt").write_bytes(b"hello world\n")
    (root / "empty.bin").write_bytes(b"")
    (root / "docs").mkdir()
    (root / "docs" / "readme.md").write_text("# readme\n")
    (root / "with space.txt").write_text("spaced\n")
    (root / SPECIAL_NAME).write_text("special\n")
    generate_test_file(root / "large.bin", 300 * 1024, seed=1)

    sibling = tmp_path / "root-evil"
    sibling.mkdir()
    (sibling / "secret.txt").write_text("secret\n")
    (tmp_path / "outside.txt").write_text("outside\n")
    return root.resolve()


@pytest.fixture
def context(root_dir):
    return RootContext(root=root_dir, host="127.0.0.1", port=8080)


@pytest.fixture
def app(context):
    return create_app(context)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def anyio_backend():
    return "asyncio"
