# security/input_validation.py

import logging
from pathlib import Path
from typing import Optional

import magic

from config import ScanConfig
from core.errors import InvalidPathError, NotAnImageError

logger = logging.getLogger(__name__)


def is_image_file(path: Path, scan_config: Optional[ScanConfig] = None) -> bool:
    """
    Classify a file as image or non-image without decoding it
    """
    scan_config = scan_config or ScanConfig()

    if not scan_config.sniff_content:
        return path.suffix.lower() in scan_config.image_extensions

    # Verify actual file type (not just extension)
    try:
        mime = magic.from_file(str(path), mime=True)
    except (OSError, magic.MagicException) as e:
        logger.warning("Unable to sniff content type of %s: %s", path, e)
        return False

    return mime.split('/')[0] == 'image'


def validate_directory(directory: str) -> Path:
    """
    Ensure the argument names an existing directory
    """
    dir_path = Path(directory)

    if not dir_path.is_dir():
        raise InvalidPathError(
            dir_path, f"Specified path ({directory}) is not a valid directory."
        )

    return dir_path


def validate_image_file(image: str, scan_config: Optional[ScanConfig] = None) -> Path:
    """
    Ensure the argument names an existing regular file that is an image
    """
    path_obj = Path(image)

    # Ensure file exists and is a file (not directory)
    if not path_obj.is_file():
        raise InvalidPathError(
            path_obj,
            f"Unable to read one or more files: {image}, "
            f"it may not exist or not be a valid file"
        )

    if not is_image_file(path_obj, scan_config):
        raise NotAnImageError(path_obj, f"{image} is not a valid image file")

    return path_obj
