"""
結果出力シンクの公開API。
"""

from .printers import (
    Base64ResultSink,
    HexResultSink,
    JsonBase64ResultSink,
    JsonHexResultSink,
    build_result_sink,
    encode_digest,
)

__all__ = [
    "Base64ResultSink",
    "HexResultSink",
    "JsonBase64ResultSink",
    "JsonHexResultSink",
    "build_result_sink",
    "encode_digest",
]
