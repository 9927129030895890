"""
タスクキューからファイルを取り出しダイジェストを計算するワーカー。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from domain import HashAlgorithm, HashResult, HashTask, TaskIOError
from domain.services import DigesterConstructor

from ..observability import MetricsRecorderProtocol, NoopMetricsRecorder
from .queues import ClosableQueue

LOGGER = logging.getLogger("hashtree.worker")

DEFAULT_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class HashWorkerConfig:
    """
    ハッシュワーカーの設定。
    """

    worker_id: str
    algorithm: HashAlgorithm
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if not self.worker_id:
            raise ValueError("worker_id は必須です。")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size は正の値である必要があります。")


class HashWorker:
    """
    タスクキューが閉じられて空になるまでファイルをハッシュし、結果キューへ送る。

    読み取りバッファはワーカーごとに 1 つ確保し、タスク間で再利用する。
    ダイジェストのアキュムレータはタスクごとに新しく生成する。
    """

    def __init__(
        self,
        *,
        config: HashWorkerConfig,
        digester_factory: DigesterConstructor,
        tasks: ClosableQueue[HashTask],
        results: ClosableQueue[HashResult],
        metrics: MetricsRecorderProtocol | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._digester_factory = digester_factory
        self._tasks = tasks
        self._results = results
        self._metrics = metrics or NoopMetricsRecorder()
        self._clock = clock or time.perf_counter
        self._buffer = bytearray(config.chunk_size)
        self.processed = 0

    @property
    def worker_id(self) -> str:
        return self._config.worker_id

    def run(self) -> None:
        """
        ワーカーループ。結果キューが中断された場合は ``QueueClosedError`` を送出する。

        Raises:
            TaskIOError: ファイルのオープン・読み取りに失敗した場合。
            QueueClosedError: 結果キューがクローズ済みの場合。
        """

        LOGGER.debug("Worker '%s' started", self.worker_id)
        for task in self._tasks:
            result = self.hash_task(task)
            self._results.put(result)
            self.processed += 1
        LOGGER.debug("Worker '%s' finished. processed=%d", self.worker_id, self.processed)

    def hash_task(self, task: HashTask) -> HashResult:
        """
        1 タスク分のファイルを先頭から順に読み込み、ダイジェストを計算する。
        """

        start = self._clock()
        digester = self._digester_factory()
        view = memoryview(self._buffer)
        size = 0
        try:
            with task.tree.open(task.path) as fh:
                while True:
                    read = fh.readinto(view)
                    if not read:
                        break
                    digester.write(view[:read])
                    size += read
        except OSError as exc:
            raise TaskIOError(task.path, exc) from exc

        digest = digester.finalize()
        duration = self._clock() - start
        self._metrics.observe_file_hashed(self._config.algorithm.value, size, duration)
        LOGGER.debug("Hashed %s (%d bytes) in %.6fs", task.path, size, duration)
        return HashResult(path=task.path, digest=digest)
