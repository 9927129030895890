"""
メトリクス初期化ロジック。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from prometheus_client import CollectorRegistry

from application.observability import MetricsRecorderProtocol, NoopMetricsRecorder
from infrastructure.metrics import PrometheusMetricsRecorder

from .container import InvalidConfigurationError, MetricsConfigurator


class MetricsConfiguratorRegistry(MetricsConfigurator):
    """
    provider 名に応じて委譲するディスパッチャ。
    """

    def __init__(self, delegates: Mapping[str, MetricsConfigurator]) -> None:
        if not delegates:
            raise ValueError("メトリクス設定の委譲先が定義されていません。")
        self._delegates = dict(delegates)

    def configure(self, config: Mapping[str, Any]) -> MetricsRecorderProtocol:
        provider = _require_string(config, "provider")
        delegate = self._delegates.get(provider)
        if delegate is None:
            raise InvalidConfigurationError(
                f"metrics provider '{provider}' に対応する初期化ロジックが見つかりません。"
            )
        return delegate.configure(config)


class NoopMetricsConfigurator(MetricsConfigurator):
    """
    provider == noop の場合に適用する実装。記録は全て破棄される。
    """

    EXPECTED_PROVIDER = "noop"

    def configure(self, config: Mapping[str, Any]) -> MetricsRecorderProtocol:
        _require_provider(config, self.EXPECTED_PROVIDER, type(self).__name__)
        return NoopMetricsRecorder()


class PrometheusTextfileMetricsConfigurator(MetricsConfigurator):
    """
    provider == prometheus の場合に適用する実装。

    options:
        textfile: 実行終了時に書き出す node_exporter textfile のパス（任意）。
        histogram_buckets: ``hashtree_file_hash_duration_seconds`` のバケット境界（任意）。
        default_labels: 全メトリクスに付与するラベル（任意）。
    """

    EXPECTED_PROVIDER = "prometheus"

    def configure(self, config: Mapping[str, Any]) -> MetricsRecorderProtocol:
        _require_provider(config, self.EXPECTED_PROVIDER, type(self).__name__)

        options = config.get("options", {})
        if not isinstance(options, Mapping):
            raise InvalidConfigurationError("metrics.options は Mapping である必要があります。")

        textfile_raw = options.get("textfile")
        textfile = Path(str(textfile_raw)) if textfile_raw else None

        return PrometheusMetricsRecorder(
            CollectorRegistry(),
            textfile=textfile,
            histogram_buckets=_parse_histogram_buckets(options.get("histogram_buckets")),
            default_labels=_parse_default_labels(options.get("default_labels")),
        )


def default_metrics_configurator() -> MetricsConfiguratorRegistry:
    return MetricsConfiguratorRegistry(
        {
            NoopMetricsConfigurator.EXPECTED_PROVIDER: NoopMetricsConfigurator(),
            PrometheusTextfileMetricsConfigurator.EXPECTED_PROVIDER: PrometheusTextfileMetricsConfigurator(),
        }
    )


def _require_provider(config: Mapping[str, Any], expected: str, configurator: str) -> None:
    provider = _require_string(config, "provider")
    if provider != expected:
        raise InvalidConfigurationError(f"provider '{provider}' は {configurator} では扱えません。")


def _require_string(config: Mapping[str, Any], key: str) -> str:
    if key not in config:
        raise InvalidConfigurationError(f"metrics 設定に '{key}' が存在しません。")
    value = config[key]
    if not isinstance(value, str) or not value:
        raise InvalidConfigurationError(f"metrics 設定の '{key}' は非空の str である必要があります。")
    return value


def _parse_histogram_buckets(raw: object) -> tuple[float, ...] | None:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)):
        raise InvalidConfigurationError("metrics.options.histogram_buckets は配列である必要があります。")
    try:
        return tuple(float(value) for value in raw)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError("histogram_buckets の値は数値である必要があります。") from exc


def _parse_default_labels(raw: object) -> Mapping[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise InvalidConfigurationError("metrics.options.default_labels は Mapping である必要があります。")
    labels: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise InvalidConfigurationError("default_labels のキーは非空の文字列である必要があります。")
        if key == "algorithm":
            raise InvalidConfigurationError("default_labels に 'algorithm' は指定できません。")
        labels[key] = str(value)
    return labels
