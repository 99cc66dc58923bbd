"""Diff report aggregation and output renderers."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from vdiff.errors import EmptyImage
from vdiff.image import DiffMask
from vdiff.options import VerdictThresholds
from vdiff.severity import Hotspot


class Verdict(str, Enum):
    """Whether a diff is acceptable, needs human review, or is a regression."""

    PASS = "pass"
    REVIEW = "review"
    FAIL = "fail"


@dataclass(frozen=True)
class DiffReport:
    """Outcome of one comparison."""

    match_percentage: float
    diff_pixel_count: int
    total_pixel_count: int
    mask: DiffMask
    hotspots: tuple[Hotspot, ...]
    verdict: Verdict

    @property
    def width(self) -> int:
        return self.mask.width

    @property
    def height(self) -> int:
        return self.mask.height

    def to_dict(self, mask_path: str | None = None) -> dict[str, Any]:
        """JSON-serialisable form; the mask is referenced by path only."""
        return {
            "verdict": self.verdict.value,
            "match_percentage": self.match_percentage,
            "diff_pixel_count": self.diff_pixel_count,
            "total_pixel_count": self.total_pixel_count,
            "width": self.width,
            "height": self.height,
            "hotspots": [h.to_dict() for h in self.hotspots],
            "diff_image": mask_path,
        }


def match_percentage(diff_pixel_count: int, total_pixel_count: int) -> float:
    """Percentage of matching pixels, clamped to [0, 100].

    Raises:
        EmptyImage: If total_pixel_count is not positive.
    """
    if total_pixel_count <= 0:
        raise EmptyImage()
    pct = 100.0 - diff_pixel_count / total_pixel_count * 100.0
    return max(0.0, min(100.0, pct))


def verdict_for(match_pct: float, thresholds: VerdictThresholds | None = None) -> Verdict:
    """Map a match percentage to a verdict; boundaries belong to the higher tier."""
    thresholds = thresholds or VerdictThresholds()
    if match_pct >= thresholds.pass_at:
        return Verdict.PASS
    if match_pct >= thresholds.review_at:
        return Verdict.REVIEW
    return Verdict.FAIL


def build_report(
    mask: DiffMask,
    diff_pixel_count: int,
    total_pixel_count: int,
    hotspots: Iterable[Hotspot],
    thresholds: VerdictThresholds | None = None,
) -> DiffReport:
    """Aggregate comparison results into a DiffReport.

    Hotspots are ordered by pixel count, largest first; ties keep their
    input order.

    Raises:
        EmptyImage: If total_pixel_count is not positive.
    """
    if total_pixel_count <= 0:
        raise EmptyImage((mask.width, mask.height))
    pct = match_percentage(diff_pixel_count, total_pixel_count)
    ranked = sorted(hotspots, key=lambda h: h.pixel_count, reverse=True)
    return DiffReport(
        match_percentage=pct,
        diff_pixel_count=diff_pixel_count,
        total_pixel_count=total_pixel_count,
        mask=mask,
        hotspots=tuple(ranked),
        verdict=verdict_for(pct, thresholds),
    )


def render_text(report: DiffReport) -> str:
    """Render a report as a summary line plus one line per hotspot."""
    lines = [
        f"{report.verdict.value}: {report.diff_pixel_count}/{report.total_pixel_count} pixels "
        f"differ ({report.match_percentage:.2f}% match)"
    ]
    for h in report.hotspots:
        lines.append(
            f"  {h.severity.value:<8} ({h.min_x},{h.min_y})-({h.max_x},{h.max_y})"
            f"  {h.pixel_count} px"
        )
    return "\n".join(lines)


def render_json(report: DiffReport, mask_path: str | None = None) -> str:
    """Render a report as a JSON object string."""
    return json.dumps(report.to_dict(mask_path), indent=2)
