# cli.py

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from config import SystemConfig
from core.duplicate_detection import DuplicateDetector
from core.errors import ImageComparerError, InvalidPathError, NotAnImageError
from core.group_resolver import GroupResolver
from core.image_cache import ImageCache
from security.input_validation import validate_image_file
from utils.file_utils import list_image_files
from utils.report_generator import ConsoleReportGenerator

logger = logging.getLogger(__name__)

USAGE = """Usage:
 image-comparer <directory>
 image-comparer <file1> <file2> [file3] ...
 image-comparer -- <file> ...   (names starting with '-')"""


def collect_images(targets: Sequence[str], config: SystemConfig) -> List[Path]:
    """
    A single target is scanned as a directory; several targets are
    validated one by one as image files
    """
    if len(targets) == 1:
        return list_image_files(targets[0], config.scan)

    return [validate_image_file(t, config.scan) for t in targets]


def compare_command(image_files: List[Path], config: SystemConfig) -> int:
    """Compare images and print the duplicate report"""
    print(f"Comparing {len(image_files)} images...")

    detector = DuplicateDetector(show_progress=config.show_progress)
    resolver = GroupResolver()

    with ImageCache(max_image_pixels=config.scan.max_image_pixels) as cache:
        images = cache.load_all(image_files)
        registry = detector.detect(images)

    resolved = resolver.finalize_all(registry)
    ConsoleReportGenerator().print_report(resolved)

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-comparer",
        description="Find pixel-identical duplicate images",
        usage=USAGE
    )
    parser.add_argument('targets', nargs='*',
                        help='A directory, or two or more image files')
    return parser


def run(argv: Optional[Sequence[str]] = None,
        config: Optional[SystemConfig] = None) -> int:
    """Parse arguments, run the comparison and return the exit code"""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on unknown options; only -h exits cleanly
        return 0 if e.code in (0, None) else 1

    config = config or SystemConfig.load()

    if not args.targets:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        image_files = collect_images(args.targets, config)
    except (InvalidPathError, NotAnImageError) as e:
        print(e, file=sys.stderr)
        return 1

    try:
        return compare_command(image_files, config)
    except ImageComparerError as e:
        logger.exception("Comparison aborted")
        print(f"Comparison aborted: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(run())
