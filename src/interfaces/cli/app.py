"""
Typer ベースの CLI エントリポイント。
"""

from __future__ import annotations

import typer

from .commands.hashing import hash_tree


def create_cli() -> typer.Typer:
    app = typer.Typer(
        help="ディレクトリツリー配下のファイルハッシュを並列に計算する。",
        add_completion=False,
    )
    app.command(options_metavar="[opts]")(hash_tree)
    return app


def main() -> None:  # pragma: no cover - console_scripts エントリポイント
    create_cli()(prog_name="hashtree")
