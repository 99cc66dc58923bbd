"""End-to-end tests for diff_images."""

from __future__ import annotations

import pytest
from conftest import noise, solid, with_rect

from vdiff import diff_images
from vdiff.errors import DimensionMismatch, EmptyImage
from vdiff.image import RGBAImage
from vdiff.options import DiffOptions, SeverityThresholds
from vdiff.report import Verdict
from vdiff.severity import Severity


class TestDiffImages:
    def test_black_square_on_white(self) -> None:
        baseline = solid(100, 100)
        current = with_rect(baseline, 10, 10, 29, 29)
        report = diff_images(baseline, current)
        assert report.diff_pixel_count == 400
        assert report.total_pixel_count == 10_000
        assert report.match_percentage == pytest.approx(96.0)
        assert report.verdict == Verdict.REVIEW
        (spot,) = report.hotspots
        assert spot.bbox == (10, 10, 29, 29)
        assert spot.pixel_count == 400
        assert spot.severity == Severity.MAJOR
        assert report.mask.count() == 400

    def test_identical_images_pass(self) -> None:
        img = noise(64, 48, seed=9)
        report = diff_images(img, RGBAImage(img.width, img.height, bytes(img.data)))
        assert report.diff_pixel_count == 0
        assert report.match_percentage == 100.0
        assert report.verdict == Verdict.PASS
        assert report.hotspots == ()

    def test_small_change_has_no_hotspot(self) -> None:
        baseline = solid(100, 100)
        current = with_rect(baseline, 0, 0, 4, 4)
        report = diff_images(baseline, current)
        assert report.diff_pixel_count == 25
        assert report.hotspots == ()
        assert report.verdict == Verdict.REVIEW

    def test_hotspots_sorted_largest_first(self) -> None:
        baseline = solid(200, 200)
        current = with_rect(baseline, 0, 0, 9, 9)
        current = with_rect(current, 100, 100, 149, 149)
        report = diff_images(baseline, current)
        assert [h.pixel_count for h in report.hotspots] == [2500, 100]
        assert [h.severity for h in report.hotspots] == [Severity.CRITICAL, Severity.MINOR]
        assert report.verdict == Verdict.FAIL

    def test_options_applied(self) -> None:
        baseline = solid(100, 100)
        current = with_rect(baseline, 10, 10, 29, 29)
        options = DiffOptions(minimum_cluster_size=0, severity=SeverityThresholds(10, 100))
        (spot,) = diff_images(baseline, current, options).hotspots
        assert spot.severity == Severity.CRITICAL

    def test_dimension_mismatch(self) -> None:
        with pytest.raises(DimensionMismatch, match="10x10 vs 10x11"):
            diff_images(solid(10, 10), solid(10, 11))

    def test_empty_image(self) -> None:
        empty = RGBAImage(0, 0, b"")
        with pytest.raises(EmptyImage):
            diff_images(empty, empty)

    def test_deterministic(self) -> None:
        a = noise(50, 50, seed=1)
        b = noise(50, 50, seed=2)
        first = diff_images(a, b)
        second = diff_images(a, b)
        assert first.diff_pixel_count == second.diff_pixel_count
        assert first.hotspots == second.hotspots
        assert first.mask.tobytes() == second.mask.tobytes()
