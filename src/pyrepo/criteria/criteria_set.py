# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Ordered, keyed collection of criteria.

Ordering contract: entries are kept in insertion order. Overwriting an
existing string key keeps the entry where it was; everything else (new
string keys, positional pushes) lands at the end. Positional entries get
integer keys handed out by the set itself, one higher than any positional
key it has held, so they never collide with each other or with string keys.

The composition engine relies on this contract: a keyed override in the
transient set replaces a standing criterion *in place*.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeAlias, TypeVar

from pyrepo.kernel.exceptions import InvalidCriteriaKeyError

V = TypeVar("V")

Key: TypeAlias = str | int


def validate_key(key: object) -> str:
    """Ensure an explicit criteria key is a non-empty string."""
    if not isinstance(key, str) or not key:
        raise InvalidCriteriaKeyError(key)
    return key


class CriteriaSet(Generic[V]):
    """Insertion-ordered mapping of criteria keys to values."""

    __slots__ = ("_entries", "_next_index")

    def __init__(self, entries: Iterable[tuple[str | None, V]] | None = None) -> None:
        self._entries: dict[Key, V] = {}
        self._next_index = 0
        for key, value in entries or ():
            if key is None:
                self.push(value)
            else:
                self.put(key, value)

    @classmethod
    def of(cls, *values: V) -> CriteriaSet[V]:
        """Build a set of positional entries."""
        return cls((None, value) for value in values)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def push(self, value: V) -> int:
        """Append *value* under the next positional key and return that key."""
        index = self._next_index
        self._entries[index] = value
        self._next_index = index + 1
        return index

    def put(self, key: str, value: V) -> None:
        """Insert or overwrite *key*; an overwrite keeps the key's position."""
        self._entries[validate_key(key)] = value

    def forget(self, key: Key) -> None:
        """Remove *key* if present."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self._next_index = 0

    def merge(self, other: CriteriaSet[V]) -> CriteriaSet[V]:
        """Return a copy with *other* laid over this set.

        Positional entries of *other* are appended; its string keys
        overwrite (in place) or append.
        """
        merged = self.copy()
        for key, value in other.items():
            if isinstance(key, int):
                merged.push(value)
            else:
                merged.put(key, value)
        return merged

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, key: Key, default: V | None = None) -> V | None:
        return self._entries.get(key, default)

    def has(self, key: Key) -> bool:
        return key in self._entries

    def keys(self) -> list[Key]:
        return list(self._entries)

    def values(self) -> list[V]:
        return list(self._entries.values())

    def items(self) -> list[tuple[Key, V]]:
        return list(self._entries.items())

    def copy(self) -> CriteriaSet[V]:
        """Independent copy with the same keys, order and positional counter."""
        duplicate: CriteriaSet[V] = CriteriaSet()
        duplicate._entries = dict(self._entries)
        duplicate._next_index = self._next_index
        return duplicate

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __getitem__(self, key: Key) -> V:
        return self._entries[key]

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        """Sets are equal when they hold equal values under the same keys, in the same order."""
        if not isinstance(other, CriteriaSet):
            return NotImplemented
        return list(self._entries.items()) == list(other._entries.items())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self._entries.items())
        return f"CriteriaSet({{{body}}})"
