"""Pixel-level image comparison."""

from __future__ import annotations

import logging

import numpy as np

from vdiff.color import antialiased, color_delta_array, luma, max_delta, pack, transparency_flip
from vdiff.errors import DimensionMismatch
from vdiff.image import DiffMask, RGBAImage
from vdiff.options import DiffOptions

log = logging.getLogger(__name__)


def check_dimensions(baseline: RGBAImage, current: RGBAImage) -> None:
    """Raise DimensionMismatch unless both images have the same size."""
    if baseline.size != current.size:
        raise DimensionMismatch(baseline.size, current.size)


def difference_plane(
    baseline: RGBAImage,
    current: RGBAImage,
    options: DiffOptions,
) -> np.ndarray:
    """Return a (height, width) boolean plane, True where pixels differ."""
    check_dimensions(baseline, current)
    difference = np.zeros((baseline.height, baseline.width), dtype=bool)
    if baseline.data == current.data:
        return difference

    arr_a = baseline.as_array()
    arr_b = current.as_array()
    packed_a = pack(arr_a)
    packed_b = pack(arr_b)

    # Only byte-different pixels can differ perceptually.
    ys, xs = np.nonzero(packed_a != packed_b)
    px_a = arr_a[ys, xs]
    px_b = arr_b[ys, xs]
    forced = transparency_flip(px_a, px_b)
    candidate = forced | (color_delta_array(px_a, px_b) > max_delta(options.threshold))

    if not options.include_anti_aliasing:
        check = candidate & ~forced
        idx = np.flatnonzero(check)
        if idx.size:
            cy, cx = ys[idx], xs[idx]
            aa = antialiased(luma(arr_a), packed_a, packed_b, cy, cx)
            aa |= antialiased(luma(arr_b), packed_b, packed_a, cy, cx)
            candidate[idx[aa]] = False
            log.debug("ignored %d anti-aliased pixels", int(np.count_nonzero(aa)))

    difference[ys[candidate], xs[candidate]] = True
    return difference


def compare(
    baseline: RGBAImage,
    current: RGBAImage,
    options: DiffOptions | None = None,
) -> tuple[DiffMask, int]:
    """Compare two images pixel-by-pixel.

    Args:
        baseline: Previously accepted image.
        current: Newly captured image.
        options: Comparison options; defaults when None.

    Returns:
        (DiffMask, diff_pixel_count). The mask holds the marker colour where
        pixels differ and the match colour elsewhere.

    Raises:
        DimensionMismatch: If the two images have different dimensions.
    """
    options = options or DiffOptions()
    difference = difference_plane(baseline, current, options)
    mask = DiffMask.from_difference(
        difference, options.diff_marker_color, options.match_color
    )
    diff_pixels = int(np.count_nonzero(difference))
    log.debug(
        "compared %dx%d images: %d differing pixels",
        baseline.width,
        baseline.height,
        diff_pixels,
    )
    return mask, diff_pixels
