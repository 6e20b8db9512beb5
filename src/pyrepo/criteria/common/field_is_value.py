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
"""Compare a single column against a value."""

from __future__ import annotations

import operator
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from pyrepo.criteria.base import RepositoryContext, resolve_column
from pyrepo.kernel.exceptions import InvalidCriteriaError

_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "like": lambda column, value: column.like(value),
    "ilike": lambda column, value: column.ilike(value),
    "in": lambda column, value: column.in_(value),
    "not in": lambda column, value: column.not_in(value),
    "is null": lambda column, _: column.is_(None),
    "is not null": lambda column, _: column.is_not(None),
}

OPERATORS = frozenset(_OPERATORS)


def compare(column: Any, op: str, value: Any) -> Any:
    """Build the SQL expression `column <op> value`."""
    build = _OPERATORS.get(op.lower())
    if build is None:
        raise InvalidCriteriaError(
            f"Unsupported operator: {op}",
            context={"operator": op, "supported": sorted(OPERATORS)},
        )
    return build(column, value)


@dataclass(frozen=True)
class FieldIsValue:
    """Filter on ``field <operator> value``.

    ``like``/``ilike`` patterns are passed through untouched, so callers add
    their own ``%`` wildcards. ``in``/``not in`` expect a sequence.
    """

    field: str
    value: Any = None
    operator: str = "="

    def __post_init__(self) -> None:
        if self.operator.lower() not in OPERATORS:
            raise InvalidCriteriaError(
                f"Unsupported operator: {self.operator}",
                context={"operator": self.operator, "supported": sorted(OPERATORS)},
            )

    def apply(self, query: Select[Any], repository: RepositoryContext) -> Select[Any]:
        column = resolve_column(repository.model, self.field)
        return query.where(compare(column, self.operator, self.value))
