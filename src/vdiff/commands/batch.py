"""vdiff batch command -- compare two directories of screenshots."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from vdiff.batch import (
    BatchItem,
    compare_directories,
    render_jsonl,
    render_shortstat,
    render_tsv,
)
from vdiff.commands._helpers import fail, resolve_options, tuning_options
from vdiff.image_io import pair_directories, save_mask


def _mask_name(name: str) -> Path:
    p = Path(name)
    return p.with_name(f"{p.stem}.diff.png")


def _write_masks(items: list[BatchItem], diff_dir: Path) -> None:
    for item in items:
        if item.report is None or item.report.diff_pixel_count == 0:
            continue
        save_mask(item.report.mask, diff_dir / _mask_name(item.name))


@click.command("batch")
@click.argument("baseline_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("current_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@tuning_options
@click.option("-j", "--jobs", default=None, type=click.IntRange(min=1), help="Worker threads.")
@click.option(
    "--diff-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Write <name>.diff.png masks here.",
)
@click.option("--no-header", is_flag=True, help="Omit TSV header")
@click.option("--jsonl", "use_jsonl", is_flag=True, help="JSONL output")
@click.option("-q", "--quiet", is_flag=True, help="Print names of non-passing entries only")
@click.option("--allow-review", is_flag=True, help="Treat review verdicts as passing.")
def batch_cmd(
    baseline_dir: Path,
    current_dir: Path,
    jobs: int | None,
    diff_dir: Path | None,
    no_header: bool,
    use_jsonl: bool,
    quiet: bool,
    allow_review: bool,
    **tuning: Any,
) -> None:
    """Compare every image in BASELINE_DIR with its namesake in CURRENT_DIR.

    Images present on one side only are reported as added/removed. Exit 0
    when every entry passes, 1 otherwise, 2 on error.
    """
    try:
        options = resolve_options(**tuning)
        pairing = pair_directories(baseline_dir, current_dir)
    except (ValueError, OSError) as exc:
        fail(str(exc))

    items = compare_directories(pairing, options, max_workers=jobs)

    if diff_dir is not None:
        try:
            _write_masks(items, diff_dir)
        except OSError as exc:
            fail(f"cannot write diff image: {exc}")

    if quiet:
        for item in items:
            if not item.passed(allow_review):
                click.echo(item.name)
    elif use_jsonl:
        if items:
            click.echo(render_jsonl(items))
    else:
        if items:
            click.echo(render_tsv(items, header=not no_header))
        click.echo(render_shortstat(items), err=True)

    sys.exit(0 if all(i.passed(allow_review) for i in items) else 1)
