"""
runtime パッケージ公開 API。
"""

from .dependencies import build_bootstrap_container, build_hash_pipeline, build_pipeline_config

__all__ = [
    "build_bootstrap_container",
    "build_hash_pipeline",
    "build_pipeline_config",
]
