"""
File operation utilities
"""

from pathlib import Path
from typing import List, Optional

from config import ScanConfig
from security.input_validation import is_image_file, validate_directory


def list_image_files(directory: str, scan_config: Optional[ScanConfig] = None) -> List[Path]:
    """Get image files directly inside directory (non-recursive), sorted by name"""
    path = validate_directory(directory)

    image_files = [
        f for f in path.iterdir()
        if f.is_file() and is_image_file(f, scan_config)
    ]

    return sorted(image_files, key=lambda f: f.name)

