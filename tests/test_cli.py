"""CLI tests for the ``json-typeset`` command (click CliRunner)."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from json_typeset import __version__
from json_typeset.cli import cli


def _records(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "in.ndjson"
    path.write_text(text, encoding="utf-8")
    return path


class TestCli:
    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_requires_a_source(self) -> None:
        result = CliRunner().invoke(cli, [])
        assert result.exit_code == 2
        assert "exactly one of --url or --input" in result.output

    def test_rejects_two_sources(self, tmp_path: Path) -> None:
        records = _records(tmp_path, "1\n")
        result = CliRunner().invoke(cli, ["--url", "https://x", "--input", str(records)])
        assert result.exit_code == 2

    def test_input_file(self, tmp_path: Path) -> None:
        records = _records(tmp_path, '{"a": 1}\n{"b": [1]}\n')
        output = tmp_path / "types.json"
        result = CliRunner().invoke(cli, ["-i", str(records), "-o", str(output)])
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text("utf-8")) == {
            "object": {
                "a": {"absent": True, "number": True},
                "b": {"array": {"number": True}},
            }
        }

    def test_stdin(self, tmp_path: Path) -> None:
        output = tmp_path / "types.json"
        result = CliRunner().invoke(
            cli, ["--input", "-", "--output", str(output)], input='"s"\nbad\n'
        )
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text("utf-8")) == {"string": True}
        assert "1 dropped" in result.output

    def test_stdin_invalid_utf8_is_dropped(self, tmp_path: Path) -> None:
        output = tmp_path / "types.json"
        result = CliRunner().invoke(
            cli, ["-i", "-", "-o", str(output)], input=b'{"a": 1}\n{"b": "\xff"}\n{"a": 2}\n'
        )
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text("utf-8")) == {"object": {"a": {"number": True}}}
        assert "1 dropped" in result.output

    def test_resume_is_default_output(self, tmp_path: Path) -> None:
        records = _records(tmp_path, "true\n")
        resume = tmp_path / "types.json"
        resume.write_text('{"null": true}\n', encoding="utf-8")
        result = CliRunner().invoke(cli, ["-i", str(records), "-r", str(resume)])
        assert result.exit_code == 0, result.output
        assert json.loads(resume.read_text("utf-8")) == {"null": True, "bool": True}

    def test_indent(self, tmp_path: Path) -> None:
        records = _records(tmp_path, "1\n")
        output = tmp_path / "types.json"
        CliRunner().invoke(cli, ["-i", str(records), "-o", str(output), "--indent", "0"])
        assert output.read_text("utf-8") == '{\n"number": true\n}\n'

    def test_missing_input_exits_1(self, tmp_path: Path) -> None:
        output = tmp_path / "types.json"
        result = CliRunner().invoke(
            cli, ["-i", str(tmp_path / "missing.ndjson"), "-o", str(output)]
        )
        assert result.exit_code == 1

    def test_missing_credential_exits_1(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            cli,
            ["--url", "https://x", "-c", str(tmp_path / "none.json"), "-o", str(tmp_path / "t")],
        )
        assert result.exit_code == 1
