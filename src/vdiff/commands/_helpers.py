"""Shared CLI helpers: tuning options and error reporting."""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click

from vdiff.options import (
    DiffOptions,
    SeverityThresholds,
    VerdictThresholds,
    default_config_path,
    load_options,
)
from vdiff.report import Verdict

__all__ = ["verbose_option", "tuning_options", "resolve_options", "fail", "exit_code_for"]


def _json_mode() -> bool:
    """Return True if the current Click context has a JSON output flag set."""
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    params = ctx.params
    return bool(params.get("use_json") or params.get("use_jsonl"))


def fail(msg: str) -> NoReturn:
    """Report an error on stderr and exit 2."""
    if _json_mode():
        click.echo(json.dumps({"error": {"message": msg}}), err=True)
    else:
        click.echo(f"error: {msg}", err=True)
    raise SystemExit(2)


def _configure_logging(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Send debug logging to stderr when --verbose is given."""
    if value:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
        logging.getLogger("vdiff").setLevel(logging.DEBUG)


verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_configure_logging,
    help="Log comparison details to stderr.",
)


def _parse_rgb(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[int, int, int] | None:
    if value is None:
        return None
    try:
        parts = tuple(int(p) for p in value.split(","))
    except ValueError:
        parts = ()
    if len(parts) != 3:
        raise click.BadParameter(f"{value!r} is not R,G,B", ctx=ctx, param=param)
    return parts  # type: ignore[return-value]


def tuning_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Attach comparison tuning options to a Click command."""

    @click.option(
        "--config",
        default=None,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="JSON options file (default: $VDIFF_CONFIG).",
    )
    @click.option("--threshold", default=None, type=float, help="Colour tolerance 0-1 (0.1).")
    @click.option(
        "--include-aa",
        "include_anti_aliasing",
        is_flag=True,
        help="Count anti-aliased edge pixels as differences.",
    )
    @click.option(
        "--marker-color",
        default=None,
        metavar="R,G,B",
        callback=_parse_rgb,
        help="Diff marker colour (255,0,0).",
    )
    @click.option(
        "--min-cluster-size",
        default=None,
        type=int,
        help="Drop hotspots with this many pixels or fewer (50).",
    )
    @click.option("--major", default=None, type=int, help="Major above N pixels (300).")
    @click.option("--critical", default=None, type=int, help="Critical above N pixels (1000).")
    @click.option("--pass-at", default=None, type=float, help="Pass at match %% (99.9).")
    @click.option("--review-at", default=None, type=float, help="Review at match %% (95.0).")
    @verbose_option
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    return wrapper


def resolve_options(
    *,
    config: Path | None = None,
    threshold: float | None = None,
    include_anti_aliasing: bool | None = None,
    marker_color: tuple[int, int, int] | None = None,
    min_cluster_size: int | None = None,
    major: int | None = None,
    critical: int | None = None,
    pass_at: float | None = None,
    review_at: float | None = None,
) -> DiffOptions:
    """Merge config file and command-line values; flags win.

    Raises:
        ValueError: If the config file is invalid.
        FileNotFoundError: If $VDIFF_CONFIG names a missing file.
    """
    path = config or default_config_path()
    base = load_options(path) if path is not None else DiffOptions()

    severity = base.severity
    if major is not None or critical is not None:
        severity = SeverityThresholds(
            major=severity.major if major is None else major,
            critical=severity.critical if critical is None else critical,
        )
    verdict = base.verdict
    if pass_at is not None or review_at is not None:
        verdict = VerdictThresholds(
            pass_at=verdict.pass_at if pass_at is None else pass_at,
            review_at=verdict.review_at if review_at is None else review_at,
        )
    return base.with_overrides(
        threshold=threshold,
        include_anti_aliasing=include_anti_aliasing or None,
        diff_marker_color=marker_color,
        minimum_cluster_size=min_cluster_size,
        severity=severity,
        verdict=verdict,
    )


def exit_code_for(verdict: Verdict, allow_review: bool) -> int:
    if verdict == Verdict.PASS or (allow_review and verdict == Verdict.REVIEW):
        return 0
    return 1
