"""
ハッシュアルゴリズム識別子の値オブジェクト。
"""

from __future__ import annotations

from enum import Enum

from ..errors import UnsupportedAlgorithmError


class HashAlgorithm(str, Enum):
    """
    サポートするハッシュアルゴリズムの列挙。
    """

    CRC32 = "crc32"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @classmethod
    def parse(cls, name: str) -> "HashAlgorithm":
        """
        識別子文字列から列挙値を解決する。

        Raises:
            UnsupportedAlgorithmError: 未対応の識別子の場合。
        """

        try:
            return cls(name)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            raise UnsupportedAlgorithmError(
                f"ハッシュアルゴリズム '{name}' はサポートされていません (対応: {supported})。"
            ) from exc


DEFAULT_ALGORITHM = HashAlgorithm.SHA256
