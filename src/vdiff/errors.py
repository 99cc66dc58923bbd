"""Errors raised by a single comparison."""

from __future__ import annotations


class DiffError(ValueError):
    """Base class for comparison precondition failures."""


class DimensionMismatch(DiffError):
    """Baseline and current images differ in width or height."""

    def __init__(self, baseline_size: tuple[int, int], current_size: tuple[int, int]) -> None:
        self.baseline_size = baseline_size
        self.current_size = current_size
        bw, bh = baseline_size
        cw, ch = current_size
        super().__init__(f"size mismatch: {bw}x{bh} vs {cw}x{ch}")


class EmptyImage(DiffError):
    """The compared images contain no pixels."""

    def __init__(self, size: tuple[int, int] = (0, 0)) -> None:
        self.size = size
        super().__init__(f"empty image: {size[0]}x{size[1]} has no pixels")
