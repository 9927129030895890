"""
ディレクトリツリー配下のファイルをハッシュする CLI コマンド。
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from bootstrap import BootstrapError, verbosity_to_level
from domain import HashAlgorithm, OutputFormat, TaskIOError, UnsupportedAlgorithmError, UnsupportedFormatError, WalkError
from infrastructure import build_directory_trees
from runtime import build_bootstrap_container, build_hash_pipeline, build_pipeline_config

LOGGER = logging.getLogger("hashtree.cli")

_ALGORITHMS = "|".join(member.value for member in HashAlgorithm)
_FORMATS = "|".join([*(member.value for member in OutputFormat), "json"])


def hash_tree(
    ctx: typer.Context,
    roots: list[str] | None = typer.Argument(
        None,
        metavar="<paths...>",
        help="ハッシュ対象のルートパス（指定順に走査）",
        show_default=False,
    ),
    hash_name: str | None = typer.Option(
        None,
        "-hash",
        "--hash",
        metavar="NAME",
        help=f"ハッシュ関数 ({_ALGORITHMS})。既定値: sha256",
        show_default=False,
    ),
    fmt: str | None = typer.Option(
        None,
        "-fmt",
        "--fmt",
        metavar="NAME",
        help=f"出力フォーマット ({_FORMATS})。既定値: hex",
        show_default=False,
    ),
    jobs: int | None = typer.Option(
        None,
        "-jobs",
        "--jobs",
        metavar="N",
        help="ハッシュワーカー数。0 または未指定の場合は CPU コア数",
        show_default=False,
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="設定 YAML（hashing/logging/metrics セクション）",
        show_default=False,
    ),
    verbose: int = typer.Option(0, "-v", "--verbose", count=True, help="ログ出力を詳細にする（-vv で DEBUG）"),
) -> None:
    """
    各ルート配下の通常ファイルのハッシュを 1 行ずつ標準出力へ書き出す。

    出力順はワーカー間の完了順であり、発見順とは一致しない場合がある。
    """

    if not roots:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    if jobs is not None and jobs < 0:
        raise typer.BadParameter("jobs は 0 以上である必要があります。", param_hint="'-jobs'")

    try:
        context = build_bootstrap_container(config).initialize(log_level=verbosity_to_level(verbose))
    except BootstrapError as exc:
        typer.secho(f"hashtree: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    hashing = context.config.require_section("hashing")
    try:
        pipeline_config = build_pipeline_config(hashing, algorithm=hash_name, output_format=fmt, jobs=jobs)
    except UnsupportedAlgorithmError as exc:
        raise typer.BadParameter(str(exc), param_hint="'-hash'") from exc
    except UnsupportedFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="'-fmt'") from exc

    stdout = sys.stdout.buffer
    pipeline = build_hash_pipeline(pipeline_config, stream=stdout, metrics=context.metrics)
    trees = build_directory_trees(roots)

    try:
        pipeline.run(trees)
    except (WalkError, TaskIOError) as exc:
        stdout.flush()
        LOGGER.error("Hashing aborted: %s", exc, exc_info=LOGGER.isEnabledFor(logging.DEBUG))
        raise typer.Exit(code=1) from exc
    finally:
        stdout.flush()
        context.metrics.flush()
