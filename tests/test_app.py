"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path

from pgnstudy.app import main
from pgnstudy.core.notation import parse_multiple, sample_collection_pgn


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "studies.pgn"
    path.write_text(text, encoding="utf-8")
    return path


class TestMain:
    def test_lists_studies(self, tmp_path: Path, capsys) -> None:
        path = _write(tmp_path, sample_collection_pgn())
        assert main([str(path)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 3
        assert out[0].startswith("1. Italian Game Study: 16 moves, result *")
        assert out[1].startswith("2. Sicilian Defence Study (Round 2)")

    def test_reports_errors_with_exit_code(self, tmp_path: Path, capsys) -> None:
        path = _write(tmp_path, '[Event "A"]\n\n1. e4 *\n\n[Event "B"]\n\n) *\n')
        assert main([str(path)]) == 1
        out = capsys.readouterr().out
        assert "error: study 2: Unmatched ')'" in out

    def test_fallback_marker(self, tmp_path: Path, three_games: str, capsys) -> None:
        path = _write(tmp_path, three_games)
        assert main([str(path)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[1].endswith("[fallback]")

    def test_validate_mode(self, tmp_path: Path, capsys) -> None:
        path = _write(tmp_path, sample_collection_pgn())
        assert main([str(path), "--validate"]) == 0
        out = capsys.readouterr().out
        assert "valid: yes" in out
        assert "studies: 3" in out

    def test_export_writes_normalized_pgn(self, tmp_path: Path) -> None:
        path = _write(tmp_path, sample_collection_pgn())
        export = tmp_path / "out.pgn"
        assert main([str(path), "--export", str(export)]) == 0
        exported = parse_multiple(export.read_text(encoding="utf-8"))
        original = parse_multiple(sample_collection_pgn())
        assert [s.moves for s in exported.studies] == [s.moves for s in original.studies]
