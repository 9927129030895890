"""
prometheus-client によるハッシュ計算メトリクスの記録。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile

from application.observability import MetricsRecorderProtocol

LOGGER = logging.getLogger("hashtree.metrics")

FILES_HASHED = "hashtree_files_hashed"
BYTES_HASHED = "hashtree_bytes_hashed"
HASH_DURATION = "hashtree_file_hash_duration_seconds"


class PrometheusMetricsRecorder(MetricsRecorderProtocol):
    """
    ファイル単位のハッシュ計算を Prometheus メトリクスとして記録する。

    ``textfile`` が指定された場合、``flush`` で node_exporter の textfile
    collector 形式としてレジストリを書き出す。
    """

    def __init__(
        self,
        registry: CollectorRegistry,
        *,
        textfile: Path | None = None,
        histogram_buckets: Sequence[float] | None = None,
        default_labels: Mapping[str, str] | None = None,
    ) -> None:
        self._registry = registry
        self._textfile = textfile
        self._default_labels = dict(default_labels or {})
        label_names = (*sorted(self._default_labels), "algorithm")

        self._files_total = Counter(
            FILES_HASHED,
            "Number of files hashed",
            labelnames=label_names,
            registry=registry,
        )
        self._bytes_total = Counter(
            BYTES_HASHED,
            "Number of bytes read into digesters",
            labelnames=label_names,
            registry=registry,
        )
        if histogram_buckets:
            self._duration = Histogram(
                HASH_DURATION,
                "Time spent hashing a single file",
                labelnames=label_names,
                buckets=tuple(float(boundary) for boundary in histogram_buckets),
                registry=registry,
            )
        else:
            self._duration = Histogram(
                HASH_DURATION,
                "Time spent hashing a single file",
                labelnames=label_names,
                registry=registry,
            )

    def observe_file_hashed(self, algorithm: str, size_bytes: int, duration_seconds: float) -> None:
        labels = self._labels(algorithm)
        self._files_total.labels(**labels).inc()
        self._bytes_total.labels(**labels).inc(size_bytes)
        self._duration.labels(**labels).observe(duration_seconds)

    def flush(self) -> None:
        if self._textfile is None:
            return
        self._textfile.parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(self._textfile), self._registry)
        LOGGER.info("Metrics written to %s", self._textfile)

    def reset(self) -> None:
        for metric in (self._files_total, self._bytes_total, self._duration):
            metric.clear()

    def _labels(self, algorithm: str) -> dict[str, str]:
        labels = dict(self._default_labels)
        labels["algorithm"] = algorithm
        return labels
