# core/group_resolver.py

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from core.duplicate_detection import DuplicateGroup
from core.errors import MetadataReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileTimes:
    """Creation and last-modified timestamps of a file, in seconds"""
    created: float
    modified: float


@dataclass(frozen=True)
class ResolvedGroup:
    """Finalized duplicate group: the elected original and its duplicates"""
    original: Path
    duplicates: Tuple[Path, ...]

    @property
    def num_duplicates(self) -> int:
        return len(self.duplicates)


def read_file_times(path: Path) -> FileTimes:
    """
    Read creation and modification time.

    Birth time is used where the platform reports it; Windows reports
    creation time as st_ctime; elsewhere creation falls back to mtime.
    """
    try:
        st = os.stat(path)
    except OSError as e:
        raise MetadataReadError(path, f"Unable to read attributes of {path}: {e}") from e

    created = getattr(st, 'st_birthtime', None)
    if created is None:
        created = st.st_ctime if sys.platform == 'win32' else st.st_mtime

    return FileTimes(created=created, modified=st.st_mtime)


class GroupResolver:
    """
    Elects the original of each duplicate group by file timestamps
    """

    def __init__(self, read_times=read_file_times):
        self.read_times = read_times

    def elect_original(self, candidates: List[Path]) -> Path:
        """
        Scan candidates in order; a candidate takes over when the current
        best was created or modified strictly later than it.
        """
        best = None
        best_times = None

        for candidate in candidates:
            times = self.read_times(candidate)

            if best is None or \
               best_times.created > times.created or \
               best_times.modified > times.modified:
                best = candidate
                best_times = times

        return best

    def finalize(self, group: DuplicateGroup) -> ResolvedGroup:
        candidates = group.members()
        original = self.elect_original(candidates)

        if original != group.source:
            logger.debug("Elected %s as original over %s",
                         original.name, group.source.name)

        duplicates = tuple(p for p in candidates if p != original)
        return ResolvedGroup(original=original, duplicates=duplicates)

    def finalize_all(self, groups: Iterable[DuplicateGroup]) -> List[ResolvedGroup]:
        return [self.finalize(group) for group in groups]
