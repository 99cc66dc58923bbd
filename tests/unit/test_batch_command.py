"""Tests for the vdiff batch command."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner
from conftest import jsonl_rows, save_png, solid, with_rect

from vdiff.cli import main


def _dirs(tmp_path: Path, *, extra: bool = True) -> tuple[Path, Path]:
    base = tmp_path / "base"
    cur = tmp_path / "cur"
    white = solid(100, 100)
    save_png(base, "a.png", white)
    save_png(cur, "a.png", white)
    save_png(base, "b.png", white)
    save_png(cur, "b.png", with_rect(white, 10, 10, 29, 29))
    if extra:
        save_png(cur, "c.png", white)
    return base, cur


def _run(*args: object):
    return CliRunner().invoke(main, ["batch", *map(str, args)])


class TestBatchOutput:
    def test_tsv_and_shortstat(self, tmp_path: Path) -> None:
        result = _run(*_dirs(tmp_path))
        assert result.exit_code == 1
        assert "STATUS\tNAME\tMATCH\tDIFF_PIXELS\tHOTSPOTS" in result.output
        assert "pass\ta.png\t100.0000\t0\t0" in result.output
        assert "review\tb.png\t96.0000\t400\t1" in result.output
        assert "added\tc.png\t-\t-\t-" in result.output
        assert "2 compared: 1 pass, 1 review, 0 fail; 1 added" in result.output

    def test_no_header(self, tmp_path: Path) -> None:
        result = _run(*_dirs(tmp_path), "--no-header")
        assert "STATUS" not in result.output
        assert "pass\ta.png" in result.output

    def test_jsonl(self, tmp_path: Path) -> None:
        result = _run(*_dirs(tmp_path), "--jsonl")
        assert result.exit_code == 1
        rows = jsonl_rows(result.output)
        assert [(r["name"], r["status"]) for r in rows] == [
            ("a.png", "pass"),
            ("b.png", "review"),
            ("c.png", "added"),
        ]
        assert rows[1]["hotspots"][0]["pixel_count"] == 400

    def test_quiet(self, tmp_path: Path) -> None:
        result = _run(*_dirs(tmp_path), "-q")
        assert result.exit_code == 1
        assert result.output.split() == ["b.png", "c.png"]

    def test_removed(self, tmp_path: Path) -> None:
        base, cur = _dirs(tmp_path, extra=False)
        save_png(base, "gone.png", solid(2, 2))
        result = _run(base, cur)
        assert "removed\tgone.png" in result.output

    def test_error_entry(self, tmp_path: Path) -> None:
        base, cur = _dirs(tmp_path, extra=False)
        save_png(base, "d.png", solid(10, 10))
        save_png(cur, "d.png", solid(10, 11))
        result = _run(base, cur, "--allow-review")
        assert result.exit_code == 1
        assert "error\td.png" in result.output


class TestBatchExitCodes:
    def test_all_pass(self, tmp_path: Path) -> None:
        base = tmp_path / "base"
        cur = tmp_path / "cur"
        save_png(base, "a.png", solid(8, 8))
        save_png(cur, "a.png", solid(8, 8))
        assert _run(base, cur, "-j", "2").exit_code == 0

    def test_allow_review(self, tmp_path: Path) -> None:
        assert _run(*_dirs(tmp_path, extra=False), "--allow-review").exit_code == 0

    def test_empty_dirs(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        result = _run(tmp_path / "a", tmp_path / "b")
        assert result.exit_code == 0
        assert "0 compared: 0 pass, 0 review, 0 fail" in result.output

    def test_bad_jobs(self, tmp_path: Path) -> None:
        assert _run(*_dirs(tmp_path), "-j", "0").exit_code == 2

    def test_bad_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "c.json"
        cfg.write_text("{broken")
        result = _run(*_dirs(tmp_path), "--config", cfg)
        assert result.exit_code == 2
        assert "error: invalid config" in result.output


class TestBatchDiffDir:
    def test_masks_written_for_differing_pairs(self, tmp_path: Path) -> None:
        base, cur = _dirs(tmp_path, extra=False)
        save_png(base, "sub/x.png", solid(100, 100))
        save_png(cur, "sub/x.png", with_rect(solid(100, 100), 0, 0, 9, 9))
        out = tmp_path / "diffs"
        _run(base, cur, "--diff-dir", out)
        assert (out / "b.diff.png").exists()
        assert (out / "sub" / "x.diff.png").exists()
        assert not (out / "a.diff.png").exists()
