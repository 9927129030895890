"""
パイプラインの各段が依存するインターフェース定義。
"""

from __future__ import annotations

from io import BufferedIOBase
from typing import Callable, Iterator, Protocol

from ..models import HashResult, HashTask


class Digester(Protocol):
    """
    ストリーミングでバイト列を受け取り、最終ダイジェストを返すアキュムレータ。

    ``finalize`` は何度呼んでも同じ値を返すが、全バイトの ``write`` 後に
    呼び出す必要がある。
    """

    def write(self, chunk: bytes | memoryview) -> None:
        ...

    def finalize(self) -> bytes:
        ...


DigesterConstructor = Callable[[], Digester]


class SourceTree(Protocol):
    """
    ハッシュ対象ファイルを提供するルートツリー。
    """

    @property
    def root(self) -> str:
        ...

    def walk(self) -> Iterator[HashTask]:
        ...

    def open(self, path: str) -> BufferedIOBase:
        ...


class ResultSink(Protocol):
    """
    ``HashResult`` を 1 行のレコードとして出力するシンク。
    """

    def print(self, result: HashResult) -> None:
        ...
