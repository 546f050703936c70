# tests/conftest.py

import os

import cv2
import numpy as np
import pytest


def write_image(path, img, mtime=None):
    """Write a BGR array as a lossless image, optionally pinning its mtime"""
    cv2.imwrite(str(path), img)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_image(rng):
    """Factory for random BGR images"""
    def _make(height=32, width=32):
        return rng.integers(0, 256, (height, width, 3), dtype=np.uint8)
    return _make
