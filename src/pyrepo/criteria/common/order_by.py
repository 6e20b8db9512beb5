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
"""Order results by a column."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from pyrepo.criteria.base import RepositoryContext, resolve_column
from pyrepo.kernel.exceptions import InvalidCriteriaError


@dataclass(frozen=True)
class OrderBy:
    """Append ``ORDER BY column direction``.

    Limiting criteria applied later (``Take``) act on the ordered result.
    """

    column: str
    direction: str = "asc"

    def __post_init__(self) -> None:
        if self.direction.lower() not in ("asc", "desc"):
            raise InvalidCriteriaError(
                f"Order direction must be 'asc' or 'desc', got '{self.direction}'",
                context={"direction": self.direction},
            )

    def apply(self, query: Select[Any], repository: RepositoryContext) -> Select[Any]:
        column = resolve_column(repository.model, self.column)
        return query.order_by(column.desc() if self.direction.lower() == "desc" else column.asc())
