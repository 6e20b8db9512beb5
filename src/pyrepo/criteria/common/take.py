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
"""Cap the number of returned rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from pyrepo.criteria.base import AbstractCriterion
from pyrepo.kernel.exceptions import InvalidCriteriaError


@dataclass(frozen=True)
class Take(AbstractCriterion):
    """Limit the query to *quantity* rows."""

    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise InvalidCriteriaError(f"Take quantity must not be negative, got {self.quantity}")

    def apply_to_query(self, query: Select[Any]) -> Select[Any]:
        return query.limit(self.quantity)
