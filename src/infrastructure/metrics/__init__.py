"""
メトリクス関連の公開API。
"""

from .recorder import PrometheusMetricsRecorder

__all__ = [
    "PrometheusMetricsRecorder",
]
