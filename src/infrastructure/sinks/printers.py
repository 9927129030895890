"""
ハッシュ結果を 1 行ずつバイト列として出力するシンク実装。

パスは ``os.fsencode`` でファイルシステム上の元のバイト列に戻して書き出すため、
UTF-8 として不正なファイル名もそのまま出力される。
"""

from __future__ import annotations

import base64
import json
import os
from typing import BinaryIO, Callable, Mapping

from domain import DigestEncoding, HashResult, OutputFormat
from domain.services import ResultSink


def encode_digest(digest: bytes, encoding: DigestEncoding) -> str:
    """ダイジェストを小文字 16 進、またはパディング付き標準 Base64 に変換する。"""

    if encoding is DigestEncoding.HEX:
        return digest.hex()
    return base64.b64encode(digest).decode("ascii")


def _json_path(path: str) -> str:
    # 不正な UTF-8 バイトは U+FFFD に置き換える。
    return os.fsencode(path).decode("utf-8", errors="replace")


class _LineSink(ResultSink):
    encoding: DigestEncoding = DigestEncoding.HEX

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def print(self, result: HashResult) -> None:
        # 1 レコードを 1 回の write で出力する。
        self._stream.write(self.format_line(result))

    def format_line(self, result: HashResult) -> bytes:
        raise NotImplementedError


class HexResultSink(_LineSink):
    """``<hex>  <path>`` 形式（sha256sum 互換）で出力する。"""

    encoding = DigestEncoding.HEX

    def format_line(self, result: HashResult) -> bytes:
        digest = encode_digest(result.digest, self.encoding).encode("ascii")
        return digest + b"  " + os.fsencode(result.path) + b"\n"


class Base64ResultSink(HexResultSink):
    """``<base64>  <path>`` 形式で出力する。"""

    encoding = DigestEncoding.BASE64


class JsonHexResultSink(_LineSink):
    """
    キー ``path`` と ``hash`` を持つ JSON Lines を UTF-8 で出力する。
    """

    encoding = DigestEncoding.HEX

    def format_line(self, result: HashResult) -> bytes:
        payload = {"path": _json_path(result.path), "hash": encode_digest(result.digest, self.encoding)}
        return (json.dumps(payload, ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")


class JsonBase64ResultSink(JsonHexResultSink):
    """``hash`` を Base64 で表現する JSON Lines を出力する。"""

    encoding = DigestEncoding.BASE64


_SINKS: Mapping[OutputFormat, Callable[[BinaryIO], _LineSink]] = {
    OutputFormat.HEX: HexResultSink,
    OutputFormat.BASE64: Base64ResultSink,
    OutputFormat.JSON_HEX: JsonHexResultSink,
    OutputFormat.JSON_BASE64: JsonBase64ResultSink,
}


def build_result_sink(output_format: OutputFormat | str, stream: BinaryIO) -> ResultSink:
    """
    出力フォーマットに対応するシンクを生成する。

    Args:
        output_format: 出力フォーマット（別名を含む識別子文字列も可）。
        stream: 書き込み先のバイナリストリーム（通常は ``sys.stdout.buffer``）。

    Raises:
        UnsupportedFormatError: 未対応の識別子の場合。
    """

    resolved = output_format if isinstance(output_format, OutputFormat) else OutputFormat.parse(output_format)
    return _SINKS[resolved](stream)
