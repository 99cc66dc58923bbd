"""Perceptual colour distance and anti-aliasing detection.

Pixels are compared in YIQ space after blending alpha over white, so that
the perceived size of a change drives the decision rather than raw RGB
distance. The squared, luminance-weighted delta of two pixels is measured
against ``MAX_YIQ_DELTA * threshold**2``.

Anti-aliasing detection looks at the 3x3 neighbourhood of a differing
pixel: a pixel sitting on a smooth brightness gradient (both a darker and a
brighter neighbour, few identical neighbours) whose darkest or brightest
neighbour lies in a flat region of *both* images is an edge being smoothed,
not a content change.

The array functions take coordinate vectors (``ys``, ``xs``) and evaluate
only those positions, so cost scales with the number of candidates.
"""

from __future__ import annotations

import numpy as np

RGBA = tuple[int, int, int, int]

# Largest possible delta between two YIQ colours (black vs white).
MAX_YIQ_DELTA = 35215.0

# (dx, dy) in row-major order around the centre pixel.
NEIGHBOURS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)


def max_delta(threshold: float) -> float:
    """Delta a pixel pair must exceed to count as different."""
    return MAX_YIQ_DELTA * threshold * threshold


def _blend(arr: np.ndarray) -> np.ndarray:
    """Blend RGBA over white, returning float RGB with shape (..., 3)."""
    rgb = arr[..., :3].astype(np.float64)
    alpha = arr[..., 3:4].astype(np.float64) / 255.0
    return 255.0 + (rgb - 255.0) * alpha


def _y(rgb: np.ndarray) -> np.ndarray:
    return rgb[..., 0] * 0.29889531 + rgb[..., 1] * 0.58662247 + rgb[..., 2] * 0.11448223


def _i(rgb: np.ndarray) -> np.ndarray:
    return rgb[..., 0] * 0.59597799 - rgb[..., 1] * 0.27417610 - rgb[..., 2] * 0.32180189


def _q(rgb: np.ndarray) -> np.ndarray:
    return rgb[..., 0] * 0.21147017 - rgb[..., 1] * 0.52261711 + rgb[..., 2] * 0.31114694


def color_delta_array(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Squared perceptual distance between two (..., 4) uint8 arrays."""
    ca = _blend(a)
    cb = _blend(b)
    y = _y(ca) - _y(cb)
    i = _i(ca) - _i(cb)
    q = _q(ca) - _q(cb)
    return 0.5053 * y * y + 0.299 * i * i + 0.1957 * q * q


def luma(arr: np.ndarray) -> np.ndarray:
    """Brightness (Y) of every pixel of a (..., 4) array, alpha-blended over white."""
    return _y(_blend(arr))


def transparency_flip(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """True where one pixel is fully transparent and the other fully opaque."""
    alpha_a = a[..., 3]
    alpha_b = b[..., 3]
    return ((alpha_a == 0) & (alpha_b == 255)) | ((alpha_a == 255) & (alpha_b == 0))


def color_delta(a: RGBA, b: RGBA) -> float:
    """Squared perceptual distance between two pixels."""
    return float(
        color_delta_array(np.asarray(a, dtype=np.uint8), np.asarray(b, dtype=np.uint8))
    )


def pixels_differ(a: RGBA, b: RGBA, threshold: float = 0.1) -> bool:
    """Decide whether two pixels differ, ignoring neighbourhood context."""
    if tuple(a) == tuple(b):
        return False
    pa = np.asarray(a, dtype=np.uint8)
    pb = np.asarray(b, dtype=np.uint8)
    if bool(transparency_flip(pa, pb)):
        return True
    return float(color_delta_array(pa, pb)) > max_delta(threshold)


def pack(arr: np.ndarray) -> np.ndarray:
    """View an (h, w, 4) uint8 array as (h, w) uint32 for whole-pixel equality."""
    return np.ascontiguousarray(arr, dtype=np.uint8).view(np.uint32)[..., 0]


def _on_border(ys: np.ndarray, xs: np.ndarray, width: int, height: int) -> np.ndarray:
    return ((xs == 0) | (xs == width - 1) | (ys == 0) | (ys == height - 1)).astype(np.int64)


def _neighbour(
    ys: np.ndarray, xs: np.ndarray, dx: int, dy: int, width: int, height: int
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Clipped neighbour coordinates plus an in-bounds mask."""
    ny = ys + dy
    nx = xs + dx
    valid = (ny >= 0) & (ny < height) & (nx >= 0) & (nx < width)
    return np.clip(ny, 0, height - 1), np.clip(nx, 0, width - 1), valid


def has_many_siblings(packed: np.ndarray, ys: np.ndarray, xs: np.ndarray) -> np.ndarray:
    """True where a pixel has more than two identical neighbours.

    Image edges count as one identical neighbour.
    """
    height, width = packed.shape
    centre = packed[ys, xs]
    same = _on_border(ys, xs, width, height)
    for dx, dy in NEIGHBOURS:
        ny, nx, valid = _neighbour(ys, xs, dx, dy, width, height)
        same += valid & (packed[ny, nx] == centre)
    return same > 2


def antialiased(
    luma_plane: np.ndarray,
    packed: np.ndarray,
    other_packed: np.ndarray,
    ys: np.ndarray,
    xs: np.ndarray,
) -> np.ndarray:
    """Flag positions that look like anti-aliased edges in this image.

    Args:
        luma_plane: (h, w) brightness of the image being inspected.
        packed: (h, w) uint32 pixels of the image being inspected.
        other_packed: (h, w) uint32 pixels of the other image.
        ys: Row coordinates to test.
        xs: Column coordinates to test.

    Returns:
        Boolean array, one entry per coordinate.
    """
    height, width = luma_plane.shape
    n = ys.size
    result = np.zeros(n, dtype=bool)
    if n == 0:
        return result

    centre = luma_plane[ys, xs]
    zeroes = _on_border(ys, xs, width, height)
    darkest = np.zeros(n)
    brightest = np.zeros(n)
    dark_y, dark_x = ys.copy(), xs.copy()
    bright_y, bright_x = ys.copy(), xs.copy()

    for dx, dy in NEIGHBOURS:
        ny, nx, valid = _neighbour(ys, xs, dx, dy, width, height)
        delta = centre - luma_plane[ny, nx]
        zeroes += valid & (delta == 0)
        lower = valid & (delta < darkest)
        darkest = np.where(lower, delta, darkest)
        dark_y = np.where(lower, ny, dark_y)
        dark_x = np.where(lower, nx, dark_x)
        higher = valid & (delta > brightest)
        brightest = np.where(higher, delta, brightest)
        bright_y = np.where(higher, ny, bright_y)
        bright_x = np.where(higher, nx, bright_x)

    # A gradient needs both a darker and a brighter neighbour and at most two flat ones.
    gradient = (zeroes <= 2) & (darkest != 0) & (brightest != 0)
    idx = np.flatnonzero(gradient)
    if idx.size == 0:
        return result

    dy_, dx_ = dark_y[idx], dark_x[idx]
    by_, bx_ = bright_y[idx], bright_x[idx]
    dark_flat = has_many_siblings(packed, dy_, dx_) & has_many_siblings(other_packed, dy_, dx_)
    bright_flat = has_many_siblings(packed, by_, bx_) & has_many_siblings(other_packed, by_, bx_)
    result[idx] = dark_flat | bright_flat
    return result


def is_antialiased(baseline: np.ndarray, current: np.ndarray, x: int, y: int) -> bool:
    """Check one position of two (h, w, 4) arrays for anti-aliasing in either image."""
    ys = np.array([y], dtype=np.int64)
    xs = np.array([x], dtype=np.int64)
    pa = pack(baseline)
    pb = pack(current)
    return bool(
        antialiased(luma(baseline), pa, pb, ys, xs)[0]
        or antialiased(luma(current), pb, pa, ys, xs)[0]
    )
