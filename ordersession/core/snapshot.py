"""
Snapshot comparison and cloning for clean/dirty tracking.

Equality is always by value: models are compared through their dumped
field data, never by identity, and clones share no mutable substructure.
"""

import copy
from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


class SnapshotDiffer:
    """Pure helpers over records, sub-resources and plain data."""

    @staticmethod
    def is_equal(a: Any, b: Any) -> bool:
        """Deep structural equality; models must also share a type."""
        if isinstance(a, BaseModel) or isinstance(b, BaseModel):
            if type(a) is not type(b):
                return False
        return _plain(a) == _plain(b)

    @staticmethod
    def clone(value: T) -> T:
        """Independent deep copy."""
        return copy.deepcopy(value)

    @classmethod
    def changed_paths(cls, a: Any, b: Any) -> set[str]:
        """
        Dotted paths whose values differ between a and b.

        Lists are compared index by index; an index present on one side only
        is reported as changed. Equal inputs give an empty set.
        """
        changed: set[str] = set()
        cls._walk(_plain(a), _plain(b), "", changed)
        return changed

    @classmethod
    def _walk(cls, a: Any, b: Any, prefix: str, changed: set[str]) -> None:
        if isinstance(a, dict) and isinstance(b, dict):
            for key in a.keys() | b.keys():
                path = f"{prefix}.{key}" if prefix else str(key)
                if key not in a or key not in b:
                    changed.add(path)
                else:
                    cls._walk(a[key], b[key], path, changed)
        elif isinstance(a, list) and isinstance(b, list):
            for index in range(max(len(a), len(b))):
                path = f"{prefix}.{index}" if prefix else str(index)
                if index >= len(a) or index >= len(b):
                    changed.add(path)
                else:
                    cls._walk(a[index], b[index], path, changed)
        elif a != b:
            changed.add(prefix)


class CleanDirtyPair:
    """
    A persisted baseline and the working copy edits are applied to.

    clean is only ever replaced wholesale; dirty starts as a deep copy of it.
    """

    def __init__(self, clean: Any):
        self.clean = clean
        self.dirty = SnapshotDiffer.clone(clean)

    @property
    def is_clean(self) -> bool:
        return SnapshotDiffer.is_equal(self.dirty, self.clean)

    def commit(self) -> None:
        """Make the current dirty copy the new baseline."""
        self.clean = SnapshotDiffer.clone(self.dirty)

    def revert(self) -> None:
        """Discard edits by re-cloning dirty from clean."""
        self.dirty = SnapshotDiffer.clone(self.clean)

    def reset(self, clean: Any) -> None:
        self.clean = clean
        self.dirty = SnapshotDiffer.clone(clean)

    def changed_paths(self) -> set[str]:
        return SnapshotDiffer.changed_paths(self.clean, self.dirty)
