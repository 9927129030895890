"""
アプリケーション層から利用する観測性インターフェース。

メトリクス実装は Bootstrap で生成され、パイプラインへ明示的に渡される。
未設定の場合は ``NoopMetricsRecorder`` が使われる。
"""

from __future__ import annotations

from typing import Protocol


class MetricsRecorderProtocol(Protocol):
    def observe_file_hashed(self, algorithm: str, size_bytes: int, duration_seconds: float) -> None: ...

    def flush(self) -> None: ...

    def reset(self) -> None: ...


class NoopMetricsRecorder(MetricsRecorderProtocol):
    def observe_file_hashed(self, algorithm: str, size_bytes: int, duration_seconds: float) -> None:  # noqa: D401
        pass

    def flush(self) -> None:
        pass

    def reset(self) -> None:
        pass
