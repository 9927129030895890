"""
実行前の初期化を担う DI コンテナ。

設定ロード、ロギング初期化、メトリクス初期化を統括し、利用側には
初期化済みのコンテキストを返す。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from application.observability import MetricsRecorderProtocol


class ConfigLoader(Protocol):
    """設定を読み込み、検証済みの構成を返すインターフェース。"""

    def load(self) -> "ConfigBundle":
        raise NotImplementedError


class LoggingConfigurator(Protocol):
    """ロギング設定を適用するインターフェース。"""

    def configure(self, config: Mapping[str, Any]) -> None:
        raise NotImplementedError


class MetricsConfigurator(Protocol):
    """メトリクスの初期化を行い、記録オブジェクトを返すインターフェース。"""

    def configure(self, config: Mapping[str, Any]) -> MetricsRecorderProtocol:
        raise NotImplementedError


class BootstrapError(RuntimeError):
    """ブートストラップ処理でのエラーを表す基底例外。"""


class MissingConfigurationError(BootstrapError):
    """必須設定が欠落している場合の例外。"""


class InvalidConfigurationError(BootstrapError):
    """設定値が期待する形式ではない場合の例外。"""


@dataclass(frozen=True)
class ConfigBundle:
    """検証済み設定の辞書ラッパー。"""

    root: Mapping[str, Any]

    def require_section(self, section: str) -> Mapping[str, Any]:
        """
        指定セクションの存在と型を検証して返す。

        Args:
            section: 取得したい設定セクション名。

        Returns:
            Mapping[str, Any]: セクション内容。

        Raises:
            MissingConfigurationError: セクションが存在しない場合。
            InvalidConfigurationError: セクションがマッピングではない場合。
        """

        if section not in self.root:
            raise MissingConfigurationError(f"設定セクション '{section}' が存在しません。")

        value = self.root[section]
        if not isinstance(value, Mapping):
            raise InvalidConfigurationError(
                f"設定セクション '{section}' は Mapping である必要があります。"
            )
        return value

    def require_value(self, section: str, key: str) -> Any:
        """
        指定セクション内のキーの存在と値を検証して返す。

        Raises:
            MissingConfigurationError: キーが存在しない場合。
        """

        mapping = self.require_section(section)
        if key not in mapping:
            raise MissingConfigurationError(f"設定キー '{section}.{key}' が存在しません。")
        return mapping[key]


@dataclass(frozen=True)
class BootstrapContext:
    """
    ブートストラップ処理後に利用側へ渡すコンテキスト。
    """

    config: ConfigBundle
    metrics: MetricsRecorderProtocol


@dataclass
class BootstrapContainer:
    """
    実行前の初期化を司るコンテナ。

    Attributes:
        config_loader: 設定ローダ。
        logging_configurator: ロギング設定適用オブジェクト。
        metrics_configurator: メトリクス設定適用オブジェクト。
    """

    config_loader: ConfigLoader
    logging_configurator: LoggingConfigurator
    metrics_configurator: MetricsConfigurator

    def initialize(self, *, log_level: str | None = None) -> BootstrapContext:
        """
        設定ロード・ロギング初期化・メトリクス初期化を順に実行する。

        Args:
            log_level: 指定された場合、設定ファイルの root ロガーレベルを上書きする。

        Returns:
            BootstrapContext: 初期化済みのコンテキスト。

        Raises:
            BootstrapError: 初期化過程での検証エラー。
        """

        config_bundle = self.config_loader.load()

        logging_config = config_bundle.require_section("logging")
        metrics_config = config_bundle.require_section("metrics")

        if log_level is not None:
            logging_config = _override_root_level(logging_config, log_level)

        self.logging_configurator.configure(logging_config)
        metrics = self.metrics_configurator.configure(metrics_config)

        return BootstrapContext(config=config_bundle, metrics=metrics)


def _override_root_level(config: Mapping[str, Any], level: str) -> dict[str, Any]:
    result = dict(config)
    root = config.get("root", {})
    if not isinstance(root, Mapping):
        raise InvalidConfigurationError("logging.root は Mapping である必要があります。")
    result["root"] = {**root, "level": level}
    return result
