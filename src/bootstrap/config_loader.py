"""
組み込みの既定値と任意の設定 YAML をマージし、検証済みの ConfigBundle を生成するローダ。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from application.services import DEFAULT_CHUNK_SIZE, DEFAULT_QUEUE_FACTOR
from domain import DEFAULT_ALGORITHM, DEFAULT_FORMAT, HashAlgorithm, OutputFormat

from .container import ConfigBundle, ConfigLoader, InvalidConfigurationError, MissingConfigurationError

DEFAULT_CONFIG: Mapping[str, Any] = {
    "hashing": {
        "algorithm": DEFAULT_ALGORITHM.value,
        "format": DEFAULT_FORMAT.value,
        "jobs": 0,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "queue_factor": DEFAULT_QUEUE_FACTOR,
    },
    "logging": {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": "WARNING", "handlers": ["stderr"]},
    },
    "metrics": {
        "provider": "noop",
        "options": {},
    },
}

# 配下に任意のキーを追加できるセクション。
_OPEN_SECTIONS = frozenset({"logging", "metrics.options"})


class HashingSettingsModel(BaseModel):
    """hashing セクションの検証モデル。"""

    model_config = ConfigDict(extra="forbid")

    algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    format: OutputFormat = DEFAULT_FORMAT
    jobs: int = Field(default=0, ge=0)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)
    queue_factor: int = Field(default=DEFAULT_QUEUE_FACTOR, gt=0)

    @field_validator("algorithm", mode="before")
    @classmethod
    def _parse_algorithm(cls, value: object) -> HashAlgorithm:
        if isinstance(value, HashAlgorithm):
            return value
        return HashAlgorithm.parse(str(value))

    @field_validator("format", mode="before")
    @classmethod
    def _parse_format(cls, value: object) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        return OutputFormat.parse(str(value))


class LoggingConfigModel(BaseModel):
    """logging 設定の最小検証モデル。"""

    model_config = ConfigDict(extra="allow")

    version: int


class MetricsConfigModel(BaseModel):
    """metrics 設定の最小検証モデル。"""

    model_config = ConfigDict(extra="allow")

    provider: str
    options: dict[str, Any] = Field(default_factory=dict)


class AppConfigModel(BaseModel):
    """
    設定全体のバリデーション。

    hashing は厳密に検証し、logging と metrics は最低限の構造のみを検証して
    その他のキーは追加情報として保持する。
    """

    model_config = ConfigDict(extra="forbid")

    hashing: HashingSettingsModel
    logging: LoggingConfigModel
    metrics: MetricsConfigModel


class YamlConfigLoader(ConfigLoader):
    """
    組み込み既定値に、指定された YAML ファイルの内容を上書きマージする実装。

    YAML 側で既定値に存在しないキーを追加することはできない（logging と
    metrics.options 配下を除く）。
    """

    def __init__(self, config_path: Path | None = None, *, defaults: Mapping[str, Any] = DEFAULT_CONFIG) -> None:
        self._config_path = config_path
        self._defaults = defaults

    def load(self) -> ConfigBundle:
        merged: dict[str, Any] = _deep_merge({}, self._defaults)
        if self._config_path is not None:
            overlay = self._load_yaml(self._config_path)
            _validate_overlay_keys(self._defaults, overlay)
            merged = _deep_merge(merged, overlay)

        try:
            validated = AppConfigModel(**merged)
        except ValidationError as exc:
            raise InvalidConfigurationError(f"設定値の検証に失敗しました: {exc}") from exc

        return ConfigBundle(root=validated.model_dump())

    @staticmethod
    def _load_yaml(file_path: Path) -> Mapping[str, Any]:
        if not file_path.exists():
            raise MissingConfigurationError(f"設定ファイルが存在しません: {file_path}")
        if not file_path.is_file():
            raise MissingConfigurationError(f"設定ファイルがファイルではありません: {file_path}")

        try:
            with file_path.open("r", encoding="utf-8") as fh:
                content = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise InvalidConfigurationError(f"YAML の解析に失敗しました: {file_path}") from exc

        if content is None:
            raise InvalidConfigurationError(f"YAML ファイルが空です: {file_path}")

        if not isinstance(content, Mapping):
            raise InvalidConfigurationError(
                f"YAML ファイルのトップレベルは Mapping である必要があります: {file_path}"
            )

        return content


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """
    ネストされた辞書をマージする。overlay の値が優先される。
    """

    result: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        elif isinstance(value, Mapping):
            result[key] = _deep_merge({}, value)
        else:
            result[key] = value
    return result


def _validate_overlay_keys(base: Mapping[str, Any], overlay: Mapping[str, Any], *, path: str = "") -> None:
    """
    設定ファイルで未定義キーが追加されていないか検証する。
    """

    for key, value in overlay.items():
        if key not in base:
            raise InvalidConfigurationError(f"未定義の設定キー '{path}{key}' が検出されました。")

        if f"{path}{key}" in _OPEN_SECTIONS:
            continue

        base_value = base[key]
        if isinstance(value, Mapping) and isinstance(base_value, Mapping):
            _validate_overlay_keys(base_value, value, path=f"{path}{key}.")
        elif isinstance(value, Mapping) and not isinstance(base_value, Mapping):
            raise InvalidConfigurationError(
                f"設定キー '{path}{key}' は非マッピング型ですが、Mapping が指定されました。"
            )
