"""Many independent comparisons at once, plus batch renderers.

Comparisons share no mutable state, so pairs run on a thread pool and
results come back in input order.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from PIL import Image

from vdiff.engine import diff_images
from vdiff.errors import DiffError
from vdiff.image import RGBAImage
from vdiff.image_io import DirectoryPairing, load_image
from vdiff.options import DiffOptions
from vdiff.report import DiffReport

log = logging.getLogger(__name__)

ImageSource = RGBAImage | Path


class PairStatus(str, Enum):
    """Outcome of one batch entry."""

    PASS = "pass"
    REVIEW = "review"
    FAIL = "fail"
    ERROR = "error"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class BatchItem:
    """Result of one pair; exactly one of report/error is set for compared pairs."""

    name: str
    status: PairStatus
    report: DiffReport | None = None
    error: str | None = None

    def passed(self, allow_review: bool = False) -> bool:
        """True for a pass verdict, or a review verdict when ``allow_review``."""
        if self.status == PairStatus.REVIEW:
            return allow_review
        return self.status == PairStatus.PASS


def _resolve(source: ImageSource) -> RGBAImage:
    return source if isinstance(source, RGBAImage) else load_image(source)


def _run_pair(
    name: str, baseline: ImageSource, current: ImageSource, options: DiffOptions
) -> BatchItem:
    try:
        report = diff_images(_resolve(baseline), _resolve(current), options)
    except (DiffError, OSError, Image.DecompressionBombError) as exc:
        log.warning("comparison %s failed: %s", name, exc)
        return BatchItem(name=name, status=PairStatus.ERROR, error=str(exc))
    return BatchItem(name=name, status=PairStatus(report.verdict.value), report=report)


def compare_batch(
    pairs: Sequence[tuple[str, ImageSource, ImageSource]],
    options: DiffOptions | None = None,
    max_workers: int | None = None,
) -> list[BatchItem]:
    """Run independent comparisons concurrently.

    Args:
        pairs: (name, baseline, current) triples; images may be paths.
        options: Options shared by every comparison.
        max_workers: Thread pool size (None = executor default, 1 = serial).

    Returns:
        One BatchItem per pair, in input order. A failing pair is recorded
        with its error message instead of aborting the batch.
    """
    options = options or DiffOptions()
    if max_workers == 1 or len(pairs) <= 1:
        return [_run_pair(name, a, b, options) for name, a, b in pairs]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [pool.submit(_run_pair, name, a, b, options) for name, a, b in pairs]
        return [f.result() for f in futures]


def compare_directories(
    pairing: DirectoryPairing,
    options: DiffOptions | None = None,
    max_workers: int | None = None,
) -> list[BatchItem]:
    """Compare paired files and append added/removed entries, sorted by name."""
    items = compare_batch(pairing.pairs, options, max_workers)
    items += [BatchItem(name=n, status=PairStatus.ADDED) for n in pairing.added]
    items += [BatchItem(name=n, status=PairStatus.REMOVED) for n in pairing.removed]
    return sorted(items, key=lambda i: i.name)


# -- Renderers ---------------------------------------------------------------


def item_to_dict(item: BatchItem) -> dict[str, object]:
    data: dict[str, object] = {"name": item.name, "status": item.status.value}
    if item.report is not None:
        data.update(item.report.to_dict())
    if item.error is not None:
        data["error"] = item.error
    return data


def render_tsv(items: list[BatchItem], *, header: bool = True) -> str:
    """Render batch items as a TSV table.

    Columns: STATUS, NAME, MATCH (percent), DIFF_PIXELS, HOTSPOTS. Fields
    that do not apply are '-'.
    """
    lines: list[str] = []
    if header:
        lines.append("STATUS\tNAME\tMATCH\tDIFF_PIXELS\tHOTSPOTS")
    for item in items:
        name = item.name.replace("\t", "\\t")
        r = item.report
        if r is None:
            lines.append(f"{item.status.value}\t{name}\t-\t-\t-")
        else:
            lines.append(
                f"{item.status.value}\t{name}\t{r.match_percentage:.4f}"
                f"\t{r.diff_pixel_count}\t{len(r.hotspots)}"
            )
    return "\n".join(lines)


def render_jsonl(items: list[BatchItem]) -> str:
    """Render batch items as JSONL, one object per item."""
    return "\n".join(json.dumps(item_to_dict(i)) for i in items)


def render_shortstat(items: list[BatchItem]) -> str:
    """Render a one-line count per status.

    Returns:
        String like "12 compared: 10 pass, 1 review, 1 fail; 2 added".
    """
    counts = {s: sum(1 for i in items if i.status == s) for s in PairStatus}
    verdicts = (PairStatus.PASS, PairStatus.REVIEW, PairStatus.FAIL)
    compared = sum(counts[s] for s in verdicts)
    line = f"{compared} compared: " + ", ".join(f"{counts[s]} {s.value}" for s in verdicts)
    extra = [
        f"{counts[s]} {s.value}"
        for s in (PairStatus.ERROR, PairStatus.ADDED, PairStatus.REMOVED)
        if counts[s]
    ]
    return f"{line}; {', '.join(extra)}" if extra else line
