from __future__ import annotations

from pathlib import Path

from prometheus_client import CollectorRegistry

from infrastructure.metrics import PrometheusMetricsRecorder


def test_metrics_recorder_updates_prometheus_metrics() -> None:
    registry = CollectorRegistry()
    recorder = PrometheusMetricsRecorder(registry, default_labels={"service": "test"})

    recorder.observe_file_hashed("sha256", 10, 0.5)
    recorder.observe_file_hashed("sha256", 5, 0.25)
    recorder.observe_file_hashed("md5", 1, 0.1)

    labels = {"algorithm": "sha256", "service": "test"}
    assert registry.get_sample_value("hashtree_files_hashed_total", labels=labels) == 2.0
    assert registry.get_sample_value("hashtree_bytes_hashed_total", labels=labels) == 15.0
    assert registry.get_sample_value("hashtree_file_hash_duration_seconds_sum", labels=labels) == 0.75
    assert (
        registry.get_sample_value(
            "hashtree_files_hashed_total", labels={"algorithm": "md5", "service": "test"}
        )
        == 1.0
    )

    recorder.reset()
    assert registry.get_sample_value("hashtree_files_hashed_total", labels=labels) is None


def test_metrics_recorder_custom_buckets() -> None:
    registry = CollectorRegistry()
    recorder = PrometheusMetricsRecorder(registry, histogram_buckets=[0.01, 1.0])

    recorder.observe_file_hashed("crc32", 1, 0.5)

    assert (
        registry.get_sample_value(
            "hashtree_file_hash_duration_seconds_bucket", labels={"algorithm": "crc32", "le": "1.0"}
        )
        == 1.0
    )


def test_flush_writes_textfile(tmp_path: Path) -> None:
    target = tmp_path / "collector" / "hashtree.prom"
    recorder = PrometheusMetricsRecorder(CollectorRegistry(), textfile=target)
    recorder.observe_file_hashed("sha1", 3, 0.01)

    recorder.flush()

    content = target.read_text(encoding="utf-8")
    assert 'hashtree_files_hashed_total{algorithm="sha1"} 1.0' in content


def test_flush_without_textfile_is_noop(tmp_path: Path) -> None:
    recorder = PrometheusMetricsRecorder(CollectorRegistry())
    recorder.flush()
    assert list(tmp_path.iterdir()) == []
