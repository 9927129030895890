"""
アプリケーションサービスの公開API。
"""

from .hash_worker import DEFAULT_CHUNK_SIZE, HashWorker, HashWorkerConfig
from .pipeline import (
    DEFAULT_QUEUE_FACTOR,
    HashPipeline,
    PipelineConfig,
    PipelineReport,
    ResultDrain,
    default_worker_count,
)
from .queues import ClosableQueue

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_QUEUE_FACTOR",
    "ClosableQueue",
    "HashPipeline",
    "HashWorker",
    "HashWorkerConfig",
    "PipelineConfig",
    "PipelineReport",
    "ResultDrain",
    "default_worker_count",
]
