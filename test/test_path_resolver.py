import os

import pytest

from error_translator import Forbidden
from path_resolver import resolve_request_path


def test_resolves_file_inside_root(root_dir):
    assert resolve_request_path(root_dir, "/hello.txt") == root_dir / "hello.txt"


def test_percent_decodes_once(root_dir):
    assert resolve_request_path(root_dir, "/with%20space.txt") == root_dir / "with space.txt"
    # %2520 -> "%20", 두 번 디코딩하지 않음
    assert resolve_request_path(root_dir, "/with%2520space.txt") == root_dir / "with%20space.txt"


@pytest.mark.parametrize("raw_path", ["/", "", "/docs/..", "/./"])
def test_root_itself_is_allowed(root_dir, raw_path):
    assert resolve_request_path(root_dir, raw_path) == root_dir


def test_dot_segments_inside_root(root_dir):
    assert resolve_request_path(root_dir, "/docs/../hello.txt") == root_dir / "hello.txt"


@pytest.mark.parametrize(
    "raw_path",
    [
        "/../outside.txt",
        "/%2e%2e/outside.txt",
        "/%2E%2E%2Foutside.txt",
        "/docs/../../outside.txt",
        "/..%2f..%2f..%2fetc/passwd",
        "/%2e%2e",
    ],
)
def test_traversal_is_forbidden(root_dir, raw_path):
    with pytest.raises(Forbidden):
        resolve_request_path(root_dir, raw_path)


def test_sibling_with_shared_prefix_is_forbidden(root_dir):
    # root-evil은 root로 시작하지만 root 아래가 아님
    assert (root_dir.parent / "root-evil" / "secret.txt").exists()
    with pytest.raises(Forbidden):
        resolve_request_path(root_dir, "/..%2Froot-evil/secret.txt")


def test_absolute_looking_path_stays_under_root(root_dir):
    resolved = resolve_request_path(root_dir, "//etc/passwd")
    assert resolved == root_dir / "etc" / "passwd"


def test_symlink_escaping_root_is_forbidden(root_dir):
    os.symlink(root_dir.parent / "outside.txt", root_dir / "escape.txt")
    with pytest.raises(Forbidden):
        resolve_request_path(root_dir, "/escape.txt")


def test_symlink_inside_root_is_followed(root_dir):
    os.symlink(root_dir / "hello.txt", root_dir / "alias.txt")
    assert resolve_request_path(root_dir, "/alias.txt") == root_dir / "hello.txt"


def test_null_byte_is_forbidden(root_dir):
    with pytest.raises(Forbidden):
        resolve_request_path(root_dir, "/hello.txt%00.png")


def test_forbidden_carries_status_and_body():
    exc = Forbidden()
    assert exc.status_code == 403
    assert exc.detail == "Forbidden"
