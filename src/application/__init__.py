"""
アプリケーション層パッケージ初期化。
"""

from .observability import MetricsRecorderProtocol, NoopMetricsRecorder
from .services import (
    ClosableQueue,
    HashPipeline,
    HashWorker,
    HashWorkerConfig,
    PipelineConfig,
    PipelineReport,
    ResultDrain,
)

__all__ = [
    "MetricsRecorderProtocol",
    "NoopMetricsRecorder",
    "ClosableQueue",
    "HashPipeline",
    "HashWorker",
    "HashWorkerConfig",
    "PipelineConfig",
    "PipelineReport",
    "ResultDrain",
]
