from __future__ import annotations

import base64
import hashlib
import json
import os
import re
import sys
import time
from pathlib import Path

import pytest
from prometheus_client.parser import text_string_to_metric_families
from typer.testing import CliRunner

from infrastructure.storage import LocalDirectoryTree
from interfaces.cli.app import create_cli

runner = CliRunner()

HEX_LINE = re.compile(r"^[0-9a-f]+  .+$")
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


@pytest.fixture()
def sample_root(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir()
    (root / "a.txt").write_bytes(b"")
    (root / "b.txt").write_bytes(b"hello")
    return root


def _data_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if HEX_LINE.match(line)]


def test_hex_output_for_sample_tree(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["-hash", "sha256", "-fmt", "hex", "-jobs", "1", str(sample_root)])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == [
        f"{EMPTY_SHA256}  a.txt",
        f"{hashlib.sha256(b'hello').hexdigest()}  b.txt",
    ]


def test_double_dash_options_are_accepted(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["--hash", "md5", "--jobs", "2", str(sample_root)])

    assert result.exit_code == 0, result.output
    assert sorted(result.stdout.splitlines()) == sorted(
        [
            f"{hashlib.md5(b'').hexdigest()}  a.txt",
            f"{hashlib.md5(b'hello').hexdigest()}  b.txt",
        ]
    )


def test_json_base64_output(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["-fmt", "json-base64", "-jobs", "1", str(sample_root)])

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in result.stdout.splitlines()]
    assert records == [
        {"path": "a.txt", "hash": base64.b64encode(hashlib.sha256(b"").digest()).decode()},
        {"path": "b.txt", "hash": base64.b64encode(hashlib.sha256(b"hello").digest()).decode()},
    ]


def test_unknown_hash_exits_before_output(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["-hash", "foo", str(sample_root)])

    assert result.exit_code != 0
    assert _data_lines(result.stdout) == []


def test_unknown_format_exits_before_output(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["-fmt", "text", str(sample_root)])

    assert result.exit_code != 0
    assert _data_lines(result.stdout) == []


def test_negative_jobs_is_rejected(sample_root: Path) -> None:
    result = runner.invoke(create_cli(), ["-jobs", "-1", str(sample_root)])

    assert result.exit_code != 0
    assert _data_lines(result.stdout) == []


def test_no_roots_prints_usage_and_fails() -> None:
    result = runner.invoke(create_cli(), [])

    assert result.exit_code == 1
    assert "Usage" in result.output
    assert _data_lines(result.stdout) == []


def test_missing_root_is_fatal(tmp_path: Path) -> None:
    result = runner.invoke(create_cli(), [str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert _data_lines(result.stdout) == []


def test_config_file_supplies_defaults(sample_root: Path, tmp_path: Path) -> None:
    config = tmp_path / "hashtree.yaml"
    config.write_text("hashing:\n  algorithm: sha1\n  jobs: 1\n", encoding="utf-8")

    result = runner.invoke(create_cli(), ["--config", str(config), str(sample_root)])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines()[1] == f"{hashlib.sha1(b'hello').hexdigest()}  b.txt"


def test_cli_flags_override_config_file(sample_root: Path, tmp_path: Path) -> None:
    config = tmp_path / "hashtree.yaml"
    config.write_text("hashing:\n  algorithm: sha1\n  jobs: 1\n", encoding="utf-8")

    result = runner.invoke(create_cli(), ["--config", str(config), "-hash", "crc32", str(sample_root)])

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["00000000  a.txt", "3610a686  b.txt"]


def test_invalid_config_file_is_fatal(sample_root: Path, tmp_path: Path) -> None:
    config = tmp_path / "hashtree.yaml"
    config.write_text("hashing:\n  unknown: 1\n", encoding="utf-8")

    result = runner.invoke(create_cli(), ["--config", str(config), str(sample_root)])

    assert result.exit_code == 1
    assert _data_lines(result.stdout) == []


def test_prometheus_textfile_is_written(sample_root: Path, tmp_path: Path) -> None:
    textfile = tmp_path / "metrics" / "hashtree.prom"
    config = tmp_path / "hashtree.yaml"
    config.write_text(
        "metrics:\n"
        "  provider: prometheus\n"
        "  options:\n"
        f"    textfile: {textfile.as_posix()}\n"
        "    default_labels:\n"
        "      job: cli-test\n",
        encoding="utf-8",
    )

    result = runner.invoke(create_cli(), ["--config", str(config), "-hash", "md5", str(sample_root)])

    assert result.exit_code == 0, result.output
    samples = {
        sample.name: (sample.labels, sample.value)
        for family in text_string_to_metric_families(textfile.read_text(encoding="utf-8"))
        for sample in family.samples
    }
    labels = {"job": "cli-test", "algorithm": "md5"}
    assert samples["hashtree_files_hashed_total"] == (labels, 2.0)
    assert samples["hashtree_bytes_hashed_total"] == (labels, 5.0)


def test_unreadable_file_is_fatal_and_keeps_earlier_lines(
    sample_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    original_open = LocalDirectoryTree.open

    def open_or_fail(self: LocalDirectoryTree, path: str):  # type: ignore[no-untyped-def]
        if path == "b.txt":
            # a.txt の行が出力されるのを待ってから失敗させる。
            time.sleep(0.3)
            raise PermissionError(13, "Permission denied", path)
        return original_open(self, path)

    monkeypatch.setattr(LocalDirectoryTree, "open", open_or_fail)

    result = runner.invoke(create_cli(), ["-jobs", "1", str(sample_root)])

    assert result.exit_code == 1
    assert _data_lines(result.stdout) == [f"{EMPTY_SHA256}  a.txt"]
    assert "ERROR hashtree.cli" in result.output
    assert "b.txt" in result.output
    assert "Permission denied" in result.output


def test_walk_failure_is_logged_at_error(tmp_path: Path) -> None:
    result = runner.invoke(create_cli(), [str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "ERROR hashtree.cli" in result.output


@pytest.mark.skipif(sys.platform != "linux", reason="requires a filesystem that accepts arbitrary name bytes")
def test_undecodable_file_name_is_printed_as_raw_bytes(tmp_path: Path) -> None:
    (tmp_path / "ok.txt").write_bytes(b"ok")
    (tmp_path / os.fsdecode(b"bad-\xff.txt")).write_bytes(b"bad")

    result = runner.invoke(create_cli(), ["-hash", "md5", "-jobs", "1", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert result.stdout_bytes.splitlines() == [
        hashlib.md5(b"bad").hexdigest().encode() + b"  bad-\xff.txt",
        hashlib.md5(b"ok").hexdigest().encode() + b"  ok.txt",
    ]


@pytest.mark.skipif(sys.platform != "linux", reason="requires a filesystem that accepts arbitrary name bytes")
def test_undecodable_file_name_in_json_uses_replacement_character(tmp_path: Path) -> None:
    (tmp_path / os.fsdecode(b"bad-\xff.txt")).write_bytes(b"bad")

    result = runner.invoke(create_cli(), ["-fmt", "json", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout_bytes.decode("utf-8")) == {
        "path": "bad-\ufffd.txt",
        "hash": hashlib.sha256(b"bad").hexdigest(),
    }
