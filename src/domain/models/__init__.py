"""
ドメインエンティティの公開API。
"""

from .hash_task import HashResult, HashTask

__all__ = [
    "HashResult",
    "HashTask",
]
