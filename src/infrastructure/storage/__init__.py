"""
ファイルシステムアクセス層の公開API。
"""

from .filesystem import ROOT_FILE_PATH, LocalDirectoryTree, build_directory_trees

__all__ = [
    "ROOT_FILE_PATH",
    "LocalDirectoryTree",
    "build_directory_trees",
]
