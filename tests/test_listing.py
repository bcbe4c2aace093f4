import os

import pytest

from archive.errors import FilesystemError
from archive.listing import filter_paths, list_all, traversal_key


def test_list_all_is_sorted_preorder(project) -> None:
    listed = list_all(project)
    assert listed == [
        ".env",
        "README.md",
        "build.log",
        "empty/",
        "node_modules/",
        "node_modules/dep/",
        "node_modules/dep/index.js",
        "src/",
        "src/main.py",
        "src/pkg/",
        "src/pkg/util.py",
    ]
    assert listed == sorted(listed, key=traversal_key)


def test_list_all_missing_dir_is_empty(tmp_path) -> None:
    assert list_all(tmp_path / "missing") == []


def test_list_all_empty_dir_emits_marker(tmp_path) -> None:
    (tmp_path / "only").mkdir()
    assert list_all(tmp_path) == ["only/"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_directories_are_not_followed(tmp_path) -> None:
    (tmp_path / "real").mkdir()
    (tmp_path / "real" / "f.txt").write_text("x", encoding="utf-8")
    try:
        os.symlink(tmp_path, tmp_path / "real" / "loop", target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlink")
    assert list_all(tmp_path) == ["real/", "real/f.txt", "real/loop"]


def test_list_all_reports_unreadable_dirs(tmp_path, monkeypatch) -> None:
    def denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("archive.listing.os.scandir", denied)
    with pytest.raises(FilesystemError, match="Cannot list"):
        list_all(tmp_path)


def test_filter_paths_keeps_order(project) -> None:
    kept = filter_paths(list_all(project), ["**/*"], ["*.log", "node_modules/**"])
    assert kept == ["README.md", "empty/", "src/", "src/main.py", "src/pkg/", "src/pkg/util.py"]
