"""
Generic keyed tree zip used by the merger.

Provides the three-way walk over two keyed mappings once, so callers only
supply what happens when a key exists on both sides.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import TypeVar

T = TypeVar("T")


def zip_keyed(
    fresh: Mapping[str, T],
    existing: Mapping[str, T],
    merge_both: Callable[[T, T], T],
) -> dict[str, T]:
    """Combine two keyed mappings with fresh as the source of truth for keys.

    - key only in fresh: copied as-is
    - key only in existing: dropped
    - key in both: merge_both(fresh_value, existing_value)

    Args:
        fresh: Newly derived mapping
        existing: Previously persisted mapping
        merge_both: Combines the two values of a shared key

    Returns:
        A new mapping containing exactly the keys of fresh
    """
    merged: dict[str, T] = {}
    for key, fresh_value in fresh.items():
        if key in existing:
            merged[key] = merge_both(fresh_value, existing[key])
        else:
            merged[key] = copy.deepcopy(fresh_value)
    return merged
