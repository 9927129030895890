"""
ハッシュ計算パイプラインの例外定義。
"""

from __future__ import annotations


class HashTreeError(RuntimeError):
    """hashtree が発生させる基底例外。"""


class UnsupportedAlgorithmError(HashTreeError, ValueError):
    """対応していないハッシュアルゴリズムが指定された。"""


class UnsupportedFormatError(HashTreeError, ValueError):
    """対応していない出力フォーマットが指定された。"""


class WalkError(HashTreeError):
    """ディレクトリ走査中にエントリの stat/読み取りに失敗した。"""


class TaskIOError(HashTreeError):
    """タスク対象ファイルのオープンまたは読み取りに失敗した。"""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"ファイルの読み取りに失敗しました: {path}: {cause}")
        self.path = path
        self.cause = cause


class QueueClosedError(HashTreeError):
    """クローズ済みのキューに対する操作。"""
