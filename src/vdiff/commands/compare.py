"""vdiff compare command -- one baseline/current screenshot pair."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click
from PIL import Image

from vdiff.commands._helpers import exit_code_for, fail, resolve_options, tuning_options
from vdiff.engine import diff_images
from vdiff.image_io import load_image, save_mask
from vdiff.report import render_json, render_text


@click.command("compare")
@click.argument("baseline", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("current", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@tuning_options
@click.option(
    "--diff-output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write diff mask PNG (only when pixels differ).",
)
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
@click.option("--allow-review", is_flag=True, help="Exit 0 on a review verdict.")
def compare_cmd(
    baseline: Path,
    current: Path,
    diff_output: Path | None,
    use_json: bool,
    allow_review: bool,
    **tuning: Any,
) -> None:
    """Compare a current screenshot against its baseline.

    Exit 0 on pass, 1 on review or fail, 2 on error (size mismatch,
    empty or invalid image, bad config).
    """
    try:
        options = resolve_options(**tuning)
        report = diff_images(load_image(baseline), load_image(current), options)
    except (ValueError, OSError, Image.DecompressionBombError) as exc:
        fail(str(exc))

    mask_path: Path | None = None
    if diff_output is not None and report.diff_pixel_count > 0:
        try:
            mask_path = save_mask(report.mask, diff_output)
        except OSError as exc:
            fail(f"cannot write diff image: {exc}")

    if use_json:
        click.echo(render_json(report, str(mask_path) if mask_path else None))
    else:
        click.echo(render_text(report))
        if mask_path is not None:
            click.echo(f"  diff image: {mask_path}")

    sys.exit(exit_code_for(report.verdict, allow_review))
