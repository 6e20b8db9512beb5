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
"""Page of results returned by ``BaseRepository.paginate``."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a length-aware paginated query.

    Attributes:
        items: The records on this page.
        total: Number of records across all pages.
        per_page: Maximum records per page.
        current_page: This page's number (1-based).
    """

    items: list[T]
    total: int
    per_page: int
    current_page: int

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def from_item(self) -> int | None:
        """1-based position of the first record on this page, ``None`` when empty."""
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def to_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + len(self.items)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    def map(self, func: Callable[[T], U]) -> Page[U]:
        """Transform the items, keeping the pagination metadata."""
        return Page([func(item) for item in self.items], self.total, self.per_page, self.current_page)
