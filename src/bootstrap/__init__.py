"""
ブートストラップ関連の公開API。
"""

from .config_loader import (
    DEFAULT_CONFIG,
    AppConfigModel,
    HashingSettingsModel,
    LoggingConfigModel,
    MetricsConfigModel,
    YamlConfigLoader,
)
from .container import (
    BootstrapContainer,
    BootstrapContext,
    BootstrapError,
    ConfigBundle,
    InvalidConfigurationError,
    LoggingConfigurator,
    MetricsConfigurator,
    MissingConfigurationError,
)
from .logging_setup import DictConfigLoggingConfigurator, verbosity_to_level
from .metrics_setup import (
    MetricsConfiguratorRegistry,
    NoopMetricsConfigurator,
    PrometheusTextfileMetricsConfigurator,
    default_metrics_configurator,
)

__all__ = [
    "DEFAULT_CONFIG",
    "AppConfigModel",
    "HashingSettingsModel",
    "LoggingConfigModel",
    "MetricsConfigModel",
    "YamlConfigLoader",
    "BootstrapContainer",
    "BootstrapContext",
    "BootstrapError",
    "ConfigBundle",
    "InvalidConfigurationError",
    "LoggingConfigurator",
    "MetricsConfigurator",
    "MissingConfigurationError",
    "DictConfigLoggingConfigurator",
    "verbosity_to_level",
    "MetricsConfiguratorRegistry",
    "NoopMetricsConfigurator",
    "PrometheusTextfileMetricsConfigurator",
    "default_metrics_configurator",
]
