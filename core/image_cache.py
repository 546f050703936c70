# core/image_cache.py

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import numpy as np
from PIL import Image

from core.errors import DecodeError

logger = logging.getLogger(__name__)

ARGB_MODE = 'ARGB'


def normalize_path(path: Union[str, Path]) -> Path:
    """Absolute path with '.' and '..' collapsed; symlinks are left alone"""
    return Path(os.path.normpath(os.path.abspath(path)))


def pack_argb(rgba: np.ndarray) -> np.ndarray:
    """
    Pack an (h, w, 4) RGBA uint8 array into (h, w) uint32 ARGB samples
    """
    rgba = rgba.astype(np.uint32)
    return (
        (rgba[..., 3] << 24)
        | (rgba[..., 0] << 16)
        | (rgba[..., 1] << 8)
        | rgba[..., 2]
    )


class ImageHandle:
    """
    Decoded image identified by its normalized path.

    Pixels are stored row-major, so ``pixels[y, x]`` is the sample at
    column x, row y. ``mode`` is "ARGB" for packed 8-bit colour; high
    bit-depth images keep their raw single-channel values under their
    Pillow mode ("I;16", "I" or "F").
    """

    __slots__ = ('_path', '_pixels', '_mode')

    def __init__(self, path: Union[str, Path], pixels: np.ndarray,
                 mode: str = ARGB_MODE):
        if pixels.ndim != 2:
            raise ValueError(f"Expected a 2D sample array, got shape {pixels.shape}")
        pixels = pixels.copy()
        pixels.setflags(write=False)
        self._path = normalize_path(path)
        self._pixels = pixels
        self._mode = mode

    @property
    def path(self) -> Path:
        return self._path

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    def sample(self, x: int, y: int):
        """Sample at (x, y): packed ARGB, or the raw value for high bit-depth modes"""
        return self._pixels[y, x].item()

    def __eq__(self, other):
        if not isinstance(other, ImageHandle):
            return NotImplemented
        return self._path == other._path

    def __hash__(self):
        return hash(self._path)

    def __repr__(self):
        return f"ImageHandle({str(self._path)!r}, {self.width}x{self.height}, {self._mode})"


def decode_image(path: Union[str, Path]) -> ImageHandle:
    """Decode an image file into a handle, raising DecodeError on failure"""
    try:
        with Image.open(path) as img:
            img.load()
            mode = raw_sample_mode(img.mode)
            if mode is not None:
                # RGBA conversion would clip these to 8 bits
                return ImageHandle(path, np.asarray(img), mode)
            rgba = np.asarray(img.convert('RGBA'))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(path, f"Unable to decode image {path}: {e}") from e

    return ImageHandle(path, pack_argb(rgba))


def raw_sample_mode(pillow_mode: str) -> Optional[str]:
    """Sample mode for single-channel high bit-depth images, else None"""
    if pillow_mode.startswith('I;16'):
        return 'I;16'
    if pillow_mode in ('I', 'F'):
        return pillow_mode
    return None


class ImageCache:
    """
    Per-run memo of decoded images.

    Holds every decoded buffer until ``clear()`` is called; use it as a
    context manager to release memory when the run ends or aborts.
    """

    def __init__(self, max_image_pixels: int = 100_000_000):
        self.max_image_pixels = max_image_pixels
        self._cache: Dict[Path, ImageHandle] = {}

    def get(self, path: Union[str, Path]) -> ImageHandle:
        key = normalize_path(path)

        if key in self._cache:
            return self._cache[key]

        Image.MAX_IMAGE_PIXELS = self.max_image_pixels
        logger.debug("Decoding %s", key)
        handle = decode_image(key)
        self._cache[key] = handle

        return handle

    def load_all(self, paths: Iterable[Union[str, Path]]) -> List[ImageHandle]:
        return [self.get(p) for p in paths]

    def clear(self):
        logger.debug("Releasing %d cached images", len(self._cache))
        self._cache.clear()

    def __contains__(self, path) -> bool:
        return normalize_path(path) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def __enter__(self) -> 'ImageCache':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.clear()
        return False
