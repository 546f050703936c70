# core/duplicate_detection.py

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import numpy as np
from tqdm import tqdm

from core.image_cache import ImageHandle

logger = logging.getLogger(__name__)


class DuplicateGroup:
    """
    One source path plus the paths found pixel-identical to it, in
    discovery order
    """

    def __init__(self, source: Path):
        self.source = source
        self._duplicates: List[Path] = []

    @property
    def duplicates(self) -> List[Path]:
        return list(self._duplicates)

    @property
    def num_duplicates(self) -> int:
        return len(self._duplicates)

    def add_duplicate(self, path: Path) -> bool:
        """Add a duplicate; returns False if it was already known"""
        if path == self.source or path in self._duplicates:
            return False
        self._duplicates.append(path)
        return True

    def has_duplicate(self, path: Path) -> bool:
        return path in self._duplicates

    def members(self) -> List[Path]:
        return [self.source] + self._duplicates

    def __repr__(self):
        names = [p.name for p in self._duplicates]
        return f"DuplicateGroup(source={self.source.name!r}, duplicates={names})"


class DuplicateRegistry:
    """All duplicate groups of one run, in creation order"""

    def __init__(self):
        self._groups: List[DuplicateGroup] = []

    def __iter__(self) -> Iterator[DuplicateGroup]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    @property
    def groups(self) -> List[DuplicateGroup]:
        return list(self._groups)

    @property
    def total_duplicates(self) -> int:
        return sum(g.num_duplicates for g in self._groups)

    def is_classified(self, path: Path) -> bool:
        """True once the path is a duplicate member of any group"""
        return any(g.has_duplicate(path) for g in self._groups)

    def register(self, first: Path, second: Path) -> DuplicateGroup:
        """
        Record that ``first`` and ``second`` are pixel-identical.

        Joins the first group whose source is either path; otherwise a new
        group is created with ``first`` as its source.
        """
        for group in self._groups:
            if group.source == first:
                group.add_duplicate(second)
                return group
            if group.source == second:
                group.add_duplicate(first)
                return group

        group = DuplicateGroup(first)
        group.add_duplicate(second)
        self._groups.append(group)
        return group


def images_identical(image1: ImageHandle, image2: ImageHandle) -> bool:
    """
    Exact pixel equality: same width, same height, same sample mode and
    same sample at every coordinate. Pixel data is not touched when
    dimensions or modes differ.
    """
    if image1.width != image2.width or image1.height != image2.height:
        return False

    if image1.mode != image2.mode:
        return False

    pixels1, pixels2 = image1.pixels, image2.pixels
    return bool(np.array_equal(pixels1, pixels2,
                               equal_nan=pixels1.dtype.kind == 'f'))


class DuplicateDetector:
    """
    Pairwise pixel-exact duplicate detection.

    Every unordered pair is visited once in input order. A pair is skipped
    as soon as either image has been classified as a duplicate, so grouping
    follows the first match rather than a transitive closure.
    """

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def detect(self,
               images: Sequence[ImageHandle],
               registry: Optional[DuplicateRegistry] = None) -> DuplicateRegistry:
        if registry is None:
            registry = DuplicateRegistry()

        n = len(images)
        total_pairs = n * (n - 1) // 2
        logger.info("Comparing %d images (%d pairs)", n, total_pairs)

        with tqdm(total=total_pairs, desc="Comparing images",
                  disable=not self.show_progress) as progress:
            for i in range(n):
                image1 = images[i]

                for j in range(i + 1, n):
                    image2 = images[j]
                    progress.update(1)

                    if image1.path == image2.path:
                        continue

                    if registry.is_classified(image1.path) or \
                       registry.is_classified(image2.path):
                        continue

                    logger.debug("Comparing %s to %s",
                                 image1.path.name, image2.path.name)

                    if images_identical(image1, image2):
                        group = registry.register(image1.path, image2.path)
                        logger.debug("Duplicate: %s == %s (group %s)",
                                     image1.path.name, image2.path.name,
                                     group.source.name)

        logger.info("Found %d duplicate groups with %d duplicates",
                    len(registry), registry.total_duplicates)

        return registry
