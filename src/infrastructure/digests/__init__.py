"""
ダイジェスト実装の公開API。
"""

from .factory import Crc32Digester, HashlibDigester, create_digester_factory

__all__ = [
    "Crc32Digester",
    "HashlibDigester",
    "create_digester_factory",
]
