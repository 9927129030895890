"""
ドメイン値オブジェクトの公開API。
"""

from .hash_algorithm import DEFAULT_ALGORITHM, HashAlgorithm
from .output_format import DEFAULT_FORMAT, DigestEncoding, OutputFormat

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_FORMAT",
    "DigestEncoding",
    "HashAlgorithm",
    "OutputFormat",
]
