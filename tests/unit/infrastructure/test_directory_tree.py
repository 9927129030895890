from __future__ import annotations

import os
from pathlib import Path

import pytest

from domain import WalkError
from infrastructure.storage import ROOT_FILE_PATH, LocalDirectoryTree, build_directory_trees


def _make_tree(root: Path) -> None:
    (root / "b").mkdir()
    (root / "b" / "nested").mkdir()
    (root / "a.txt").write_bytes(b"")
    (root / "b" / "x.txt").write_bytes(b"x")
    (root / "b" / "nested" / "deep.txt").write_bytes(b"deep")
    (root / "c.txt").write_bytes(b"c")
    (root / "empty").mkdir()


def test_walk_is_depth_first_in_name_order(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    tree = LocalDirectoryTree(tmp_path)

    paths = [task.path for task in tree.walk()]

    assert paths == ["a.txt", "b/nested/deep.txt", "b/x.txt", "c.txt"]


def test_walk_never_emits_directories(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    tree = LocalDirectoryTree(tmp_path)

    for task in tree.walk():
        assert (tmp_path / task.path).is_file()
        assert task.tree is tree


def test_open_reads_relative_path(tmp_path: Path) -> None:
    _make_tree(tmp_path)
    tree = LocalDirectoryTree(tmp_path)

    with tree.open("b/nested/deep.txt") as fh:
        assert fh.read() == b"deep"


def test_root_file_yields_single_dot_task(tmp_path: Path) -> None:
    target = tmp_path / "single.bin"
    target.write_bytes(b"payload")
    tree = LocalDirectoryTree(target)

    tasks = list(tree.walk())

    assert [task.path for task in tasks] == [ROOT_FILE_PATH]
    with tree.open(tasks[0].path) as fh:
        assert fh.read() == b"payload"


def test_missing_root_raises_walk_error(tmp_path: Path) -> None:
    tree = LocalDirectoryTree(tmp_path / "missing")

    with pytest.raises(WalkError):
        list(tree.walk())


def test_unreadable_directory_aborts_walk(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _make_tree(tmp_path)
    blocked = os.fspath(tmp_path / "b")
    real_scandir = os.scandir

    def fake_scandir(path):  # type: ignore[no-untyped-def]
        if os.fspath(path) == blocked:
            raise PermissionError(13, "Permission denied", blocked)
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)
    walked: list[str] = []

    with pytest.raises(WalkError) as excinfo:
        for task in LocalDirectoryTree(tmp_path).walk():
            walked.append(task.path)

    assert walked == ["a.txt"]
    assert isinstance(excinfo.value.__cause__, PermissionError)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlink unsupported")
def test_directory_symlinks_are_not_followed(tmp_path: Path) -> None:
    target = tmp_path / "target"
    target.mkdir()
    (target / "inner.txt").write_bytes(b"inner")
    root = tmp_path / "root"
    root.mkdir()
    (root / "file.txt").write_bytes(b"file")
    try:
        (root / "link_dir").symlink_to(target, target_is_directory=True)
        (root / "link_file").symlink_to(root / "file.txt")
    except OSError:
        pytest.skip("symlink creation not permitted")

    paths = [task.path for task in LocalDirectoryTree(root).walk()]

    assert paths == ["file.txt", "link_file"]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo is not available")
def test_special_files_are_skipped(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_bytes(b"a")
    os.mkfifo(tmp_path / "pipe")
    (tmp_path / "z.txt").write_bytes(b"z")

    assert [task.path for task in LocalDirectoryTree(tmp_path).walk()] == ["a.txt", "z.txt"]


def test_build_directory_trees_preserves_order(tmp_path: Path) -> None:
    trees = build_directory_trees([tmp_path / "z", tmp_path / "a"])
    assert [tree.root for tree in trees] == [os.fspath(tmp_path / "z"), os.fspath(tmp_path / "a")]


def test_empty_root_rejected() -> None:
    with pytest.raises(ValueError):
        LocalDirectoryTree("")
