"""
ローカルファイルシステム上のディレクトリツリーをタスク列として走査する実装。
"""

from __future__ import annotations

import logging
import os
import stat
from io import BufferedIOBase
from pathlib import Path
from typing import Iterator, Sequence

from domain import HashTask, WalkError
from domain.services import SourceTree

LOGGER = logging.getLogger("hashtree.walk")

ROOT_FILE_PATH = "."


class LocalDirectoryTree(SourceTree):
    """
    1 つのルートパス配下を深さ優先・名前順で走査し、ファイルごとに ``HashTask`` を返す。

    ディレクトリは辿るがタスクにはしない。ディレクトリへのシンボリックリンクは
    辿らない。ルート自体が通常ファイルの場合はパス ``.`` のタスクを 1 件返す。
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self._root = os.fspath(root)
        if not self._root:
            raise ValueError("root は空文字列にできません。")

    @property
    def root(self) -> str:
        return self._root

    def __repr__(self) -> str:
        return f"LocalDirectoryTree({self._root!r})"

    def walk(self) -> Iterator[HashTask]:
        """
        タスクを発見順に返すジェネレータ。

        Raises:
            WalkError: ルートまたは配下エントリの stat/読み取りに失敗した場合。
        """

        try:
            root_stat = os.stat(self._root)
        except OSError as exc:
            raise WalkError(f"ルートパスを参照できません: {self._root}: {exc}") from exc

        if not stat.S_ISDIR(root_stat.st_mode):
            yield HashTask(path=ROOT_FILE_PATH, tree=self)
            return

        stack: list[Iterator[os.DirEntry[str]]] = [iter(self._scan(self._root))]
        prefixes: list[str] = [""]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                prefixes.pop()
                continue

            relative = prefixes[-1] + entry.name
            if self._is_directory(entry):
                stack.append(iter(self._scan(entry.path)))
                prefixes.append(relative + "/")
            elif self._is_hashable(entry):
                yield HashTask(path=relative, tree=self)
            else:
                LOGGER.debug("Skipping non-regular entry: %s", entry.path)

    def open(self, path: str) -> BufferedIOBase:
        if path == ROOT_FILE_PATH:
            return open(self._root, "rb")
        return open(os.path.join(self._root, *path.split("/")), "rb")

    @staticmethod
    def _scan(directory: str) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(directory) as entries:
                return sorted(entries, key=lambda entry: entry.name)
        except OSError as exc:
            raise WalkError(f"ディレクトリを読み取れません: {directory}: {exc}") from exc

    @staticmethod
    def _is_directory(entry: os.DirEntry[str]) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise WalkError(f"エントリを参照できません: {entry.path}: {exc}") from exc

    @staticmethod
    def _is_hashable(entry: os.DirEntry[str]) -> bool:
        """
        通常ファイル、もしくはディレクトリ以外を指すシンボリックリンクか。

        リンク切れはタスクとして返し、ワーカー側のオープン失敗として扱う。
        """

        try:
            if entry.is_symlink():
                return not entry.is_dir(follow_symlinks=True)
            return entry.is_file(follow_symlinks=False)
        except OSError as exc:
            raise WalkError(f"エントリを参照できません: {entry.path}: {exc}") from exc


def build_directory_trees(roots: Sequence[str | Path]) -> list[LocalDirectoryTree]:
    """指定順を保ったままルートパスごとのツリーを生成する。"""

    return [LocalDirectoryTree(root) for root in roots]
