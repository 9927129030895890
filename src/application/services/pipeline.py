"""
ファイル発見・並列ハッシュ計算・結果出力を束ねるパイプライン。

構成:
    ルートツリー → タスクキュー（有限容量）→ ワーカー N 本 → 結果キュー（有限容量）
    → ResultDrain（1 本）→ ResultSink

結果の出力順は発見順と一致するとは限らない。ResultDrain は到着順をそのまま保つ。
いずれかの段で致命的なエラーが発生した場合はキャンセルを通知し、両キューを
中断・クローズしたうえで全スレッドを join し、最初のエラーを送出する。
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from domain import (
    DEFAULT_ALGORITHM,
    DEFAULT_FORMAT,
    HashAlgorithm,
    HashResult,
    HashTask,
    OutputFormat,
    QueueClosedError,
)
from domain.services import DigesterConstructor, ResultSink, SourceTree

from ..observability import MetricsRecorderProtocol, NoopMetricsRecorder
from .hash_worker import DEFAULT_CHUNK_SIZE, HashWorker, HashWorkerConfig
from .queues import ClosableQueue

LOGGER = logging.getLogger("hashtree.pipeline")

DEFAULT_QUEUE_FACTOR = 2


def default_worker_count() -> int:
    return os.cpu_count() or 1


@dataclass(frozen=True)
class PipelineConfig:
    """
    1 回の実行で不変な設定値。

    Attributes:
        algorithm: ハッシュアルゴリズム。
        output_format: 出力フォーマット。
        jobs: ワーカー数。0 の場合は CPU 数。
        chunk_size: ワーカーの読み取りバッファサイズ（バイト）。
        queue_factor: ワーカー数に対するキュー容量の倍率。
    """

    algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    output_format: OutputFormat = DEFAULT_FORMAT
    jobs: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    queue_factor: int = DEFAULT_QUEUE_FACTOR

    def __post_init__(self) -> None:
        if self.jobs < 0:
            raise ValueError("jobs は 0 以上である必要があります。")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size は正の値である必要があります。")
        if self.queue_factor <= 0:
            raise ValueError("queue_factor は 1 以上である必要があります。")

    @property
    def worker_count(self) -> int:
        return self.jobs or default_worker_count()

    @property
    def queue_capacity(self) -> int:
        return self.worker_count * self.queue_factor


@dataclass(frozen=True)
class PipelineReport:
    """
    実行結果のサマリ。
    """

    workers: int
    tasks_produced: int
    results_emitted: int
    duration_seconds: float


class ResultDrain:
    """
    結果キューから到着順に 1 件ずつ取り出し、シンクへ同期的に渡す単一コンシューマ。
    """

    def __init__(self, results: ClosableQueue[HashResult], sink: ResultSink) -> None:
        self._results = results
        self._sink = sink
        self.emitted = 0

    def run(self) -> None:
        for result in self._results:
            self._sink.print(result)
            self.emitted += 1


class _RunState:
    """1 回の実行で共有するキュー・キャンセル通知・最初のエラー。"""

    def __init__(self, capacity: int) -> None:
        self.tasks: ClosableQueue[HashTask] = ClosableQueue(capacity)
        self.results: ClosableQueue[HashResult] = ClosableQueue(capacity)
        self.cancelled = threading.Event()
        self.error: BaseException | None = None
        self._lock = threading.Lock()

    def fail(self, stage: str, exc: BaseException) -> None:
        with self._lock:
            if self.error is not None:
                LOGGER.debug("Ignoring secondary failure in %s: %s", stage, exc)
                return
            self.error = exc
        LOGGER.debug("Cancelling pipeline after failure in %s: %s", stage, exc)
        self.cancelled.set()
        discarded = self.tasks.abort() + self.results.abort()
        if discarded:
            LOGGER.debug("Discarded %d queued items", discarded)

    def guard(self, stage: str, target: Callable[[], None]) -> None:
        try:
            target()
        except QueueClosedError as exc:
            if not self.cancelled.is_set():
                self.fail(stage, exc)
        except BaseException as exc:  # noqa: BLE001
            self.fail(stage, exc)


class HashPipeline:
    """
    ルートツリー群のファイルを並列にハッシュし、結果をシンクへ出力するオーケストレータ。
    """

    def __init__(
        self,
        *,
        config: PipelineConfig,
        digester_factory: DigesterConstructor,
        sink: ResultSink,
        metrics: MetricsRecorderProtocol | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config
        self._digester_factory = digester_factory
        self._sink = sink
        self._metrics = metrics or NoopMetricsRecorder()
        self._clock = clock or time.perf_counter

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def run(self, trees: Sequence[SourceTree]) -> PipelineReport:
        """
        全ツリーを指定順に走査し、全タスクの結果を出力し終えるまでブロックする。

        Returns:
            PipelineReport: 実行サマリ。

        Raises:
            WalkError: 走査に失敗した場合。
            TaskIOError: ファイルの読み取りに失敗した場合。
        """

        config = self._config
        workers_count = config.worker_count
        state = _RunState(config.queue_capacity)
        start = self._clock()

        LOGGER.info(
            "Starting hash pipeline. workers=%d queue_capacity=%d algorithm=%s format=%s roots=%d",
            workers_count,
            config.queue_capacity,
            config.algorithm.value,
            config.output_format.value,
            len(trees),
        )

        workers = [
            HashWorker(
                config=HashWorkerConfig(
                    worker_id=f"worker-{index}",
                    algorithm=config.algorithm,
                    chunk_size=config.chunk_size,
                ),
                digester_factory=self._digester_factory,
                tasks=state.tasks,
                results=state.results,
                metrics=self._metrics,
            )
            for index in range(workers_count)
        ]
        worker_threads = [
            threading.Thread(
                target=state.guard,
                args=(worker.worker_id, worker.run),
                name=f"hashtree-{worker.worker_id}",
                daemon=True,
            )
            for worker in workers
        ]
        drain = ResultDrain(state.results, self._sink)
        drain_thread = threading.Thread(
            target=state.guard,
            args=("drain", drain.run),
            name="hashtree-drain",
            daemon=True,
        )

        for thread in worker_threads:
            thread.start()
        drain_thread.start()

        produced = 0
        try:
            produced = self._produce(trees, state)
        except QueueClosedError as exc:
            if not state.cancelled.is_set():
                state.fail("walk", exc)
        except BaseException as exc:  # noqa: BLE001
            state.fail("walk", exc)
        finally:
            state.tasks.close()
            for thread in worker_threads:
                thread.join()
            state.results.close()
            drain_thread.join()

        if state.error is not None:
            raise state.error

        report = PipelineReport(
            workers=workers_count,
            tasks_produced=produced,
            results_emitted=drain.emitted,
            duration_seconds=self._clock() - start,
        )
        LOGGER.info(
            "Hash pipeline finished. tasks=%d results=%d duration=%.3fs",
            report.tasks_produced,
            report.results_emitted,
            report.duration_seconds,
        )
        return report

    @staticmethod
    def _produce(trees: Sequence[SourceTree], state: _RunState) -> int:
        produced = 0
        for tree in trees:
            LOGGER.debug("Walking %s", tree.root)
            for task in tree.walk():
                if state.cancelled.is_set():
                    return produced
                state.tasks.put(task)
                produced += 1
        return produced
