"""
出力フォーマット識別子の値オブジェクト。
"""

from __future__ import annotations

from enum import Enum

from ..errors import UnsupportedFormatError


class DigestEncoding(str, Enum):
    """ダイジェストバイト列のテキスト表現。"""

    HEX = "hex"
    BASE64 = "base64"


class OutputFormat(str, Enum):
    """
    結果行のフォーマット列挙。

    ``json`` は ``json-hex`` の別名として扱う。
    """

    HEX = "hex"
    BASE64 = "base64"
    JSON_HEX = "json-hex"
    JSON_BASE64 = "json-base64"

    @property
    def encoding(self) -> DigestEncoding:
        if self in (OutputFormat.HEX, OutputFormat.JSON_HEX):
            return DigestEncoding.HEX
        return DigestEncoding.BASE64

    @property
    def is_json(self) -> bool:
        return self in (OutputFormat.JSON_HEX, OutputFormat.JSON_BASE64)

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """
        識別子文字列（別名を含む）から列挙値を解決する。

        Raises:
            UnsupportedFormatError: 未対応の識別子の場合。
        """

        resolved = _ALIASES.get(name, name)
        try:
            return cls(resolved)
        except ValueError as exc:
            supported = ", ".join([*(member.value for member in cls), *_ALIASES])
            raise UnsupportedFormatError(
                f"出力フォーマット '{name}' はサポートされていません (対応: {supported})。"
            ) from exc


_ALIASES = {"json": OutputFormat.JSON_HEX.value}

DEFAULT_FORMAT = OutputFormat.HEX
