"""
ハッシュ計算タスクと結果のエンティティ。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.interfaces import SourceTree


@dataclass(frozen=True)
class HashTask:
    """
    ハッシュ対象の 1 ファイルを表すタスク。

    Attributes:
        path: ルートからの相対パス（区切り文字は常に ``/``）。
        tree: タスクの発生元であるルートツリー。
    """

    path: str
    tree: "SourceTree"

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("path は必須です。")


@dataclass(frozen=True)
class HashResult:
    """
    ダイジェスト計算済みのパスとバイト列の組。
    """

    path: str
    digest: bytes
