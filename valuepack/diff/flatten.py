"""Flatten structural differences into a dotted-key change set."""

from __future__ import annotations

from typing import Iterable

from valuepack.changeset.models import ChangeSet
from valuepack.diff.models import Difference

FLATTENED_KINDS = frozenset({"value-changed"})


def flatten_differences(differences: Iterable[Difference]) -> ChangeSet:
    """Record the "from" value of every value-changed difference.

    Added, removed and type-changed paths are skipped. Paths that collapse to
    the same dotted key keep the last value seen.
    """
    changes = ChangeSet()
    for difference in differences:
        if difference.kind not in FLATTENED_KINDS:
            continue
        changes.set(difference.path.dotted(), difference.details[0].from_value)
    return changes
