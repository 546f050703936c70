# tests/test_group_resolver.py

import os
from pathlib import Path

import pytest

from core.duplicate_detection import DuplicateGroup
from core.errors import MetadataReadError
from core.group_resolver import FileTimes, GroupResolver, read_file_times


def make_group(source, *duplicates):
    group = DuplicateGroup(Path(source))
    for dup in duplicates:
        group.add_duplicate(Path(dup))
    return group


def resolver_for(times):
    """Resolver reading timestamps from a {name: (created, modified)} table"""
    return GroupResolver(read_times=lambda p: FileTimes(*times[p.name]))


def test_source_kept_when_earliest():
    resolver = resolver_for({"a.png": (1, 1), "b.png": (2, 2)})

    resolved = resolver.finalize(make_group("a.png", "b.png"))

    assert resolved.original == Path("a.png")
    assert resolved.duplicates == (Path("b.png"),)


def test_earlier_created_duplicate_becomes_original():
    resolver = resolver_for({"a.png": (5, 5), "b.png": (2, 4), "c.png": (7, 7)})

    resolved = resolver.finalize(make_group("a.png", "b.png", "c.png"))

    assert resolved.original == Path("b.png")
    assert resolved.duplicates == (Path("a.png"), Path("c.png"))


def test_modification_time_overrides_creation():
    """Current best is replaced when it was modified later, even if created earlier"""
    resolver = resolver_for({"a.png": (1, 10), "b.png": (5, 5)})

    resolved = resolver.finalize(make_group("a.png", "b.png"))

    assert resolved.original == Path("b.png")
    assert resolved.duplicates == (Path("a.png"),)


def test_first_candidate_wins_ties():
    resolver = resolver_for({"a.png": (3, 3), "b.png": (3, 3), "c.png": (3, 3)})

    resolved = resolver.finalize(make_group("a.png", "b.png", "c.png"))

    assert resolved.original == Path("a.png")
    assert resolved.duplicates == (Path("b.png"), Path("c.png"))


def test_duplicates_keep_discovery_order():
    resolver = resolver_for({
        "s.png": (4, 4), "d1.png": (6, 6), "d2.png": (1, 1), "d3.png": (5, 5)
    })

    resolved = resolver.finalize(make_group("s.png", "d1.png", "d2.png", "d3.png"))

    assert resolved.original == Path("d2.png")
    assert resolved.duplicates == (Path("s.png"), Path("d1.png"), Path("d3.png"))
    assert resolved.num_duplicates == 3


def test_finalize_all_preserves_group_order():
    resolver = resolver_for({n: (1, 1) for n in ("a.png", "b.png", "c.png", "d.png")})

    resolved = resolver.finalize_all([make_group("c.png", "d.png"),
                                      make_group("a.png", "b.png")])

    assert [r.original for r in resolved] == [Path("c.png"), Path("a.png")]


def test_read_file_times(tmp_path):
    path = tmp_path / "a.png"
    path.write_bytes(b"x")
    os.utime(path, (1_000_000, 1_500_000))

    times = read_file_times(path)

    assert times.modified == 1_500_000


def test_missing_file_raises_metadata_error(tmp_path):
    present = tmp_path / "a.png"
    present.write_bytes(b"x")
    group = make_group(present, tmp_path / "gone.png")

    with pytest.raises(MetadataReadError) as excinfo:
        GroupResolver().finalize(group)

    assert excinfo.value.path == tmp_path / "gone.png"


def test_resolved_group_is_immutable():
    resolved = resolver_for({"a.png": (1, 1), "b.png": (2, 2)}).finalize(
        make_group("a.png", "b.png"))

    with pytest.raises(AttributeError):
        resolved.original = Path("b.png")
