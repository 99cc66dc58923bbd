"""Hotspot filtering and severity labelling."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from vdiff.cluster import RawCluster
from vdiff.options import SeverityThresholds


class Severity(str, Enum):
    """How much of the image a hotspot covers."""

    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Hotspot:
    """A kept cluster with its severity."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int
    pixel_count: int
    severity: Severity

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        return self.min_x, self.min_y, self.max_x, self.max_y

    def to_dict(self) -> dict[str, object]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
            "pixel_count": self.pixel_count,
            "severity": self.severity.value,
        }


def severity_for(pixel_count: int, thresholds: SeverityThresholds | None = None) -> Severity:
    """Label a pixel count; both thresholds are exclusive (> critical, > major)."""
    thresholds = thresholds or SeverityThresholds()
    if pixel_count > thresholds.critical:
        return Severity.CRITICAL
    if pixel_count > thresholds.major:
        return Severity.MAJOR
    return Severity.MINOR


def classify_cluster(
    raw: RawCluster,
    minimum_size: int = 50,
    thresholds: SeverityThresholds | None = None,
) -> Hotspot | None:
    """Return a Hotspot for ``raw``, or None if it is noise (<= minimum_size pixels)."""
    if raw.pixel_count <= max(0, minimum_size):
        return None
    return Hotspot(
        min_x=raw.min_x,
        min_y=raw.min_y,
        max_x=raw.max_x,
        max_y=raw.max_y,
        pixel_count=raw.pixel_count,
        severity=severity_for(raw.pixel_count, thresholds),
    )


def classify_clusters(
    clusters: Iterable[RawCluster],
    minimum_size: int = 50,
    thresholds: SeverityThresholds | None = None,
) -> list[Hotspot]:
    """Drop noise clusters and label the rest, preserving input order."""
    hotspots: list[Hotspot] = []
    for raw in clusters:
        spot = classify_cluster(raw, minimum_size, thresholds)
        if spot is not None:
            hotspots.append(spot)
    return hotspots
