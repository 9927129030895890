"""
ドメイン層のパッケージ初期化。
"""

from .errors import (
    HashTreeError,
    QueueClosedError,
    TaskIOError,
    UnsupportedAlgorithmError,
    UnsupportedFormatError,
    WalkError,
)
from .models import HashResult, HashTask
from .value_objects import DEFAULT_ALGORITHM, DEFAULT_FORMAT, DigestEncoding, HashAlgorithm, OutputFormat

__all__ = [
    "HashTreeError",
    "QueueClosedError",
    "TaskIOError",
    "UnsupportedAlgorithmError",
    "UnsupportedFormatError",
    "WalkError",
    "HashResult",
    "HashTask",
    "DEFAULT_ALGORITHM",
    "DEFAULT_FORMAT",
    "DigestEncoding",
    "HashAlgorithm",
    "OutputFormat",
]
