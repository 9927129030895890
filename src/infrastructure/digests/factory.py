"""
アルゴリズム名からダイジェストアキュムレータのコンストラクタを解決する。
"""

from __future__ import annotations

import hashlib
import zlib
from typing import Callable, Mapping

from domain import HashAlgorithm
from domain.services import Digester, DigesterConstructor


class HashlibDigester(Digester):
    """
    ``hashlib`` のハッシュオブジェクトをラップする実装。
    """

    def __init__(self, name: str) -> None:
        self._hash = hashlib.new(name)

    def write(self, chunk: bytes | memoryview) -> None:
        self._hash.update(chunk)

    def finalize(self) -> bytes:
        return self._hash.digest()


class Crc32Digester(Digester):
    """
    IEEE 多項式の CRC-32。ダイジェストは 4 バイトのビッグエンディアン。
    """

    def __init__(self) -> None:
        self._value = 0

    def write(self, chunk: bytes | memoryview) -> None:
        self._value = zlib.crc32(chunk, self._value)

    def finalize(self) -> bytes:
        return (self._value & 0xFFFFFFFF).to_bytes(4, "big")


def _hashlib_constructor(name: str) -> DigesterConstructor:
    def construct() -> Digester:
        return HashlibDigester(name)

    return construct


_CONSTRUCTORS: Mapping[HashAlgorithm, Callable[[], Digester]] = {
    HashAlgorithm.CRC32: Crc32Digester,
    HashAlgorithm.MD5: _hashlib_constructor("md5"),
    HashAlgorithm.SHA1: _hashlib_constructor("sha1"),
    HashAlgorithm.SHA224: _hashlib_constructor("sha224"),
    HashAlgorithm.SHA256: _hashlib_constructor("sha256"),
    HashAlgorithm.SHA512: _hashlib_constructor("sha512"),
}


def create_digester_factory(algorithm: HashAlgorithm | str) -> DigesterConstructor:
    """
    指定アルゴリズムのアキュムレータを生成するコンストラクタを返す。

    Args:
        algorithm: ``HashAlgorithm`` もしくはその識別子文字列。

    Returns:
        DigesterConstructor: 呼び出すたびに新しいアキュムレータを返す callable。

    Raises:
        UnsupportedAlgorithmError: 未対応の識別子の場合。
    """

    resolved = algorithm if isinstance(algorithm, HashAlgorithm) else HashAlgorithm.parse(algorithm)
    return _CONSTRUCTORS[resolved]
