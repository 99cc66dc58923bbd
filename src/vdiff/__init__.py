"""vdiff: visual diff and hotspot clustering for screenshot regression checks."""

from importlib.metadata import PackageNotFoundError, version

from vdiff.batch import BatchItem, PairStatus, compare_batch
from vdiff.cluster import RawCluster, cluster
from vdiff.compare import compare
from vdiff.engine import diff_images
from vdiff.errors import DiffError, DimensionMismatch, EmptyImage
from vdiff.image import DiffMask, RGBAImage
from vdiff.options import DiffOptions, SeverityThresholds, VerdictThresholds
from vdiff.report import DiffReport, Verdict, build_report
from vdiff.severity import Hotspot, Severity, classify_clusters

__all__ = [
    "__version__",
    "BatchItem",
    "DiffError",
    "DiffMask",
    "DiffOptions",
    "DiffReport",
    "DimensionMismatch",
    "EmptyImage",
    "Hotspot",
    "PairStatus",
    "RGBAImage",
    "RawCluster",
    "Severity",
    "SeverityThresholds",
    "Verdict",
    "VerdictThresholds",
    "build_report",
    "classify_clusters",
    "cluster",
    "compare",
    "compare_batch",
    "diff_images",
]

try:
    __version__ = version("vdiff")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
