"""Full comparison pipeline: compare, cluster, classify, report."""

from __future__ import annotations

import logging

from vdiff.cluster import cluster
from vdiff.compare import check_dimensions, compare
from vdiff.errors import EmptyImage
from vdiff.image import RGBAImage
from vdiff.options import DiffOptions
from vdiff.report import DiffReport, build_report
from vdiff.severity import classify_clusters

log = logging.getLogger(__name__)


def diff_images(
    baseline: RGBAImage,
    current: RGBAImage,
    options: DiffOptions | None = None,
) -> DiffReport:
    """Compare two images and return a classified report.

    Raises:
        DimensionMismatch: If the images differ in size.
        EmptyImage: If the images have no pixels.
    """
    options = options or DiffOptions()
    check_dimensions(baseline, current)
    if baseline.pixel_count == 0:
        raise EmptyImage(baseline.size)

    mask, diff_pixels = compare(baseline, current, options)
    raw = cluster(mask)
    hotspots = classify_clusters(raw, options.minimum_cluster_size, options.severity)
    report = build_report(mask, diff_pixels, baseline.pixel_count, hotspots, options.verdict)
    log.debug(
        "verdict %s: %.4f%% match, %d/%d clusters kept",
        report.verdict.value,
        report.match_percentage,
        len(hotspots),
        len(raw),
    )
    return report
