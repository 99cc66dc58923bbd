"""Decoding and encoding at the file boundary (Pillow)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from vdiff.image import DiffMask, RGBAImage

log = logging.getLogger(__name__)

IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp", ".tif", ".tiff"})


def load_image(path: Path) -> RGBAImage:
    """Decode an image file into RGBA.

    Raises:
        FileNotFoundError: If the path does not exist.
        PIL.UnidentifiedImageError: If the file is not a valid image.
        PIL.Image.DecompressionBombError: If the image exceeds Pillow's pixel limit.
    """
    with Image.open(path) as img:
        return RGBAImage.from_pil(img)


def save_mask(mask: DiffMask, path: Path) -> Path:
    """Write a diff mask as PNG and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = mask.to_pil()
    try:
        img.save(path, "PNG")
    finally:
        img.close()
    log.debug("wrote diff mask %s", path)
    return path


@dataclass
class DirectoryPairing:
    """Image files matched by relative path across two directories."""

    pairs: list[tuple[str, Path, Path]] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)


def _image_files(root: Path) -> dict[str, Path]:
    return {
        p.relative_to(root).as_posix(): p
        for p in root.rglob("*")
        if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES
    }


def pair_directories(baseline_dir: Path, current_dir: Path) -> DirectoryPairing:
    """Match images by relative path.

    Names only in the baseline directory are ``removed``; names only in the
    current directory are ``added``. All lists are sorted by name.

    Raises:
        NotADirectoryError: If either path is not a directory.
    """
    for d in (baseline_dir, current_dir):
        if not d.is_dir():
            raise NotADirectoryError(f"not a directory: {d}")
    base = _image_files(baseline_dir)
    cur = _image_files(current_dir)
    result = DirectoryPairing()
    for name in sorted(base.keys() | cur.keys()):
        if name in base and name in cur:
            result.pairs.append((name, base[name], cur[name]))
        elif name in base:
            result.removed.append(name)
        else:
            result.added.append(name)
    return result
