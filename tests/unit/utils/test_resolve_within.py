"""Tests for resolve_within."""
from nesbridge.utils import resolve_within


def test_resolves_file_inside_root(tmp_path):
    (tmp_path / "index.html").write_text("x")

    assert resolve_within(tmp_path, "index.html") == (tmp_path / "index.html").resolve()


def test_resolves_nested_path(tmp_path):
    assert resolve_within(tmp_path, "assets/a.js") == (tmp_path / "assets" / "a.js").resolve()


def test_parent_escape_is_refused(tmp_path):
    root = tmp_path / "root"
    root.mkdir()

    assert resolve_within(root, "../secret.txt") is None
    assert resolve_within(root, "a/../../secret.txt") is None


def test_symlink_escape_is_refused(tmp_path):
    root = tmp_path / "root"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("s")
    (root / "link.txt").symlink_to(tmp_path / "secret.txt")

    assert resolve_within(root, "link.txt") is None


def test_empty_path_is_root(tmp_path):
    assert resolve_within(tmp_path, "") == tmp_path.resolve()
