"""Shared helpers for unit tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
from PIL import Image

from vdiff.image import DiffMask, RGBAImage

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)


def solid(width: int, height: int, color: tuple[int, int, int, int] = WHITE) -> RGBAImage:
    """Return a solid-colour image."""
    return RGBAImage.solid(width, height, color)


def with_rect(
    base: RGBAImage,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: tuple[int, int, int, int] = BLACK,
) -> RGBAImage:
    """Return a copy of ``base`` with the inclusive rectangle (x0,y0)-(x1,y1) filled."""
    arr = base.as_array().copy()
    arr[y0 : y1 + 1, x0 : x1 + 1] = color
    return RGBAImage.from_array(arr)


def noise(width: int, height: int, seed: int = 0) -> RGBAImage:
    """Return an opaque image of random colours."""
    rng = np.random.default_rng(seed)
    arr = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    arr[..., 3] = 255
    return RGBAImage.from_array(arr)


def mask_from_rows(rows: list[str]) -> DiffMask:
    """Build a DiffMask from strings where '#' marks a differing pixel."""
    plane = np.array([[c == "#" for c in row] for row in rows], dtype=bool)
    return DiffMask.from_difference(plane, (255, 0, 0))


def mask_from_plane(plane: np.ndarray) -> DiffMask:
    return DiffMask.from_difference(plane.astype(bool), (255, 0, 0))


def save_png(tmp_path: Path, name: str, image: RGBAImage) -> Path:
    """Write an RGBAImage as PNG and return its path."""
    p = tmp_path / name
    p.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(image.as_array())).save(p)
    return p


def assert_json_output(result: Any, exit_code: int = 0) -> dict[str, Any]:
    """Assert CLI result exit code and return the parsed JSON stdout.

    Args:
        result: ``click.testing.Result`` from ``CliRunner().invoke()``.
        exit_code: Expected exit code.

    Returns:
        Parsed JSON dict.
    """
    assert result.exit_code == exit_code, result.output
    data: dict[str, Any] = json.loads(result.output)
    return data


def jsonl_rows(output: str) -> list[dict[str, Any]]:
    """Parse the JSON object lines of a CLI output, skipping anything else."""
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]
