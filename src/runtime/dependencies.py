"""
ランタイム依存関係のビルダー。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, BinaryIO, Mapping

from application.observability import MetricsRecorderProtocol
from application.services import HashPipeline, PipelineConfig
from bootstrap import (
    BootstrapContainer,
    DictConfigLoggingConfigurator,
    YamlConfigLoader,
    default_metrics_configurator,
)
from domain import HashAlgorithm, OutputFormat
from infrastructure import build_result_sink, create_digester_factory


def build_bootstrap_container(config_path: Path | None = None) -> BootstrapContainer:
    return BootstrapContainer(
        config_loader=YamlConfigLoader(config_path),
        logging_configurator=DictConfigLoggingConfigurator(),
        metrics_configurator=default_metrics_configurator(),
    )


def build_pipeline_config(
    hashing: Mapping[str, Any],
    *,
    algorithm: str | None = None,
    output_format: str | None = None,
    jobs: int | None = None,
) -> PipelineConfig:
    """
    設定ファイルの hashing セクションに CLI 引数を上書きして PipelineConfig を生成する。

    Raises:
        UnsupportedAlgorithmError: 未対応のアルゴリズムが指定された場合。
        UnsupportedFormatError: 未対応のフォーマットが指定された場合。
        ValueError: 数値設定が範囲外の場合。
    """

    return PipelineConfig(
        algorithm=HashAlgorithm.parse(algorithm) if algorithm is not None else HashAlgorithm(hashing["algorithm"]),
        output_format=OutputFormat.parse(output_format) if output_format is not None else OutputFormat(hashing["format"]),
        jobs=jobs if jobs is not None else int(hashing["jobs"]),
        chunk_size=int(hashing["chunk_size"]),
        queue_factor=int(hashing["queue_factor"]),
    )


def build_hash_pipeline(
    config: PipelineConfig,
    *,
    stream: BinaryIO,
    metrics: MetricsRecorderProtocol | None = None,
) -> HashPipeline:
    return HashPipeline(
        config=config,
        digester_factory=create_digester_factory(config.algorithm),
        sink=build_result_sink(config.output_format, stream),
        metrics=metrics,
    )
