"""Tokenizing helpers for dot-delimited metric indexes."""

from __future__ import annotations

from enum import Enum

METRIC_TOKEN_SEPARATOR = "."


class IndexLevel(str, Enum):
    """Where an index sits relative to the base level."""

    BASE = "base"
    NEXT = "next"
    IGNORED = "ignored"


def split_tokens(index: str) -> list[str]:
    """Split an index into its ordered path segments."""
    return index.split(METRIC_TOKEN_SEPARATOR)


def reference_depth(base_level: int) -> int:
    """Segment count of base-level indexes.

    Level 0 is the root namespace. Its entries are first segments, so it
    compares like level 1.
    """
    return max(base_level, 1)


def depth_delta(index: str, base_level: int) -> int:
    return len(split_tokens(index)) - reference_depth(base_level)


def classify(index: str, base_level: int) -> IndexLevel:
    """Place ``index`` at the base level, one level below it, or nowhere."""
    delta = depth_delta(index, base_level)
    if delta == 0:
        return IndexLevel.BASE
    if delta == 1:
        return IndexLevel.NEXT
    return IndexLevel.IGNORED


def parent_index(index: str, base_level: int) -> str:
    """Return the base-level parent of a next-level index.

    At base level 0 the parent is the first segment, so the cut is made at the
    first separator rather than the last one.
    """
    if base_level > 0:
        cut = index.rfind(METRIC_TOKEN_SEPARATOR)
    else:
        cut = index.find(METRIC_TOKEN_SEPARATOR)
    if cut < 0:
        raise ValueError(f"index {index!r} has no parent segment")
    return index[:cut]


def base_level_for_prefix(prefix: str | None) -> int:
    """Number of segments in a query prefix.

    A trailing ``*`` counts as a segment: browsing ``foo.bar.*`` lists names
    such as ``foo.bar.baz``, which sit at level 3.
    """
    if not prefix:
        return 0
    return len(split_tokens(prefix.strip()))
