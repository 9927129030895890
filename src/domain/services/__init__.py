"""
ドメインサービスの公開API。
"""

from .interfaces import Digester, DigesterConstructor, ResultSink, SourceTree

__all__ = [
    "Digester",
    "DigesterConstructor",
    "ResultSink",
    "SourceTree",
]
