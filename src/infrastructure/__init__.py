"""
インフラストラクチャ層の公開API。
"""

from .digests import Crc32Digester, HashlibDigester, create_digester_factory
from .metrics import PrometheusMetricsRecorder
from .sinks import (
    Base64ResultSink,
    HexResultSink,
    JsonBase64ResultSink,
    JsonHexResultSink,
    build_result_sink,
    encode_digest,
)
from .storage import ROOT_FILE_PATH, LocalDirectoryTree, build_directory_trees

__all__ = [
    "Crc32Digester",
    "HashlibDigester",
    "create_digester_factory",
    "PrometheusMetricsRecorder",
    "Base64ResultSink",
    "HexResultSink",
    "JsonBase64ResultSink",
    "JsonHexResultSink",
    "build_result_sink",
    "encode_digest",
    "ROOT_FILE_PATH",
    "LocalDirectoryTree",
    "build_directory_trees",
]
