"""Connected-component grouping of differing pixels."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from vdiff.image import DiffMask

log = logging.getLogger(__name__)

# Orthogonal neighbours only: diagonal contact does not join two regions.
FOUR_CONNECTED = ndimage.generate_binary_structure(2, 1)


@dataclass(frozen=True)
class RawCluster:
    """Bounding box and size of one 4-connected region of differing pixels."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int
    pixel_count: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


def _discovery_order(labels: np.ndarray, count: int) -> np.ndarray:
    """Relabel components by the row-major position of their first pixel."""
    _, first = np.unique(labels.ravel(), return_index=True)
    # first[0] belongs to label 0 when any pixel matches; drop it.
    first = first[-count:]
    remap = np.zeros(count + 1, dtype=np.int32)
    remap[np.argsort(first, kind="stable") + 1] = np.arange(1, count + 1, dtype=np.int32)
    return remap[labels]


def label_components(mask: DiffMask) -> tuple[np.ndarray, list[RawCluster]]:
    """Label every differing pixel with its component.

    Components are numbered from 1 in row-major order of their first pixel;
    label 0 marks matching pixels.

    Returns:
        (labels, clusters): a (height, width) int32 label plane and one
        RawCluster per component, in label order.
    """
    labels, count = ndimage.label(mask.difference, structure=FOUR_CONNECTED)
    labels = labels.astype(np.int32, copy=False)
    if count == 0:
        return labels, []

    labels = _discovery_order(labels, count)
    sizes = np.bincount(labels.ravel(), minlength=count + 1)[1:]
    clusters = [
        RawCluster(
            min_x=int(xs.start),
            min_y=int(ys.start),
            max_x=int(xs.stop) - 1,
            max_y=int(ys.stop) - 1,
            pixel_count=int(size),
        )
        for (ys, xs), size in zip(ndimage.find_objects(labels, count), sizes.tolist())
    ]
    log.debug("found %d clusters over %d differing pixels", count, int(sizes.sum()))
    return labels, clusters


def cluster(mask: DiffMask) -> list[RawCluster]:
    """Group differing pixels of a mask into 4-connected clusters.

    Every differing pixel belongs to exactly one cluster. Order is the
    row-major discovery order of each cluster's first pixel.
    """
    return label_components(mask)[1]
