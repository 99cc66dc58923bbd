"""Tests for the top-level vdiff command group."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from conftest import save_png, solid

from vdiff import __version__
from vdiff.cli import main


@pytest.fixture
def vdiff_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("vdiff")
    yield logger
    logger.setLevel(logging.NOTSET)


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(main, ["-h"])
    assert result.exit_code == 0
    assert "compare" in result.output
    assert "batch" in result.output


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "vdiff" in result.output
    assert __version__ in result.output


@pytest.mark.parametrize(
    "argv",
    [
        ["-v", "compare", "{a}", "{a}"],
        ["compare", "{a}", "{a}", "--verbose"],
        ["batch", "{d}", "{d}", "-v"],
    ],
)
def test_verbose_logs_debug(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
    vdiff_logger: logging.Logger,
    argv: list[str],
) -> None:
    a = save_png(tmp_path / "imgs", "a.png", solid(4, 4))
    args = [arg.format(a=a, d=a.parent) for arg in argv]
    result = CliRunner().invoke(main, args)
    assert result.exit_code == 0, result.output
    assert vdiff_logger.getEffectiveLevel() == logging.DEBUG
    assert "differing pixels" in caplog.text


def test_quiet_by_default(
    tmp_path: Path, caplog: pytest.LogCaptureFixture, vdiff_logger: logging.Logger
) -> None:
    a = save_png(tmp_path, "a.png", solid(4, 4))
    result = CliRunner().invoke(main, ["compare", str(a), str(a)])
    assert result.exit_code == 0
    assert "differing pixels" not in caplog.text


def test_unknown_command() -> None:
    result = CliRunner().invoke(main, ["frobnicate"])
    assert result.exit_code == 2
