"""Tests for the command line entry point."""

import json
from pathlib import Path

import pytest

from mdtasks.__main__ import main, parse_args


def run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "today.md"
    path.write_text("- [ ] low 🔽\n- [ ] high ⏫\n", encoding="utf-8")
    return path


class TestParseArgs:
    def test_sort_options(self):
        args = parse_args(["--format", "dataview", "sort", "--cursor-line", "3", "--full"])

        assert args.command == "sort"
        assert args.format == "dataview"
        assert args.cursor_line == 3
        assert args.full is True
        assert args.file is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_invalid_format(self):
        with pytest.raises(SystemExit):
            parse_args(["--format", "org", "parse"])


class TestCommands:
    def test_parse(self, tmp_path: Path, document: Path, capsys):
        code = run(["--root", str(tmp_path), "parse", str(document), "--file-path", "today.md"])

        output = json.loads(capsys.readouterr().out)
        assert code == 0
        assert output["type"] == "parse_result"
        assert output["file_path"] == "today.md"
        assert [t["priority"] for t in output["tasks"]] == [2, 4]

    def test_sort(self, tmp_path: Path, document: Path, capsys):
        code = run(["--root", str(tmp_path), "sort", str(document)])

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == "- [ ] high ⏫\n- [ ] low 🔽\n"
        assert "Sorted" in captured.err

    def test_sort_reports_range_errors(self, tmp_path: Path, document: Path, capsys):
        code = run(["--root", str(tmp_path), "sort", str(document), "--cursor-line", "50"])

        assert code == 1
        assert "outside the document" in capsys.readouterr().err

    def test_generate_config(self, tmp_path: Path, capsys):
        code = run(["--root", str(tmp_path), "generate-config"])

        assert code == 0
        assert "# mdtasks Configuration" in capsys.readouterr().out
