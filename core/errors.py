# core/errors.py

from pathlib import Path
from typing import Union


class ImageComparerError(Exception):
    """Base class for every failure that aborts a comparison run"""

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(message)


class InvalidPathError(ImageComparerError):
    """Argument is not an existing directory or regular file"""


class NotAnImageError(ImageComparerError):
    """File exists but does not classify as an image"""


class DecodeError(ImageComparerError):
    """File looked like an image but its pixel data could not be decoded"""


class MetadataReadError(ImageComparerError):
    """File timestamps could not be read while electing an original"""
