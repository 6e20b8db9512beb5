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
"""Criterion contract and the tombstone variant used for one-off suppression.

A *criterion* is any object with ``apply(query, repository) -> query``. It
receives a SQLAlchemy ``Select`` and the repository it is applied for, and
returns the transformed statement. Criteria are value objects: built-in
criteria are frozen dataclasses, so two criteria with the same parameters
compare equal, which is what change detection between materializations
relies on.

:class:`Suppress` is deliberately *not* a criterion. It only ever lives in
the transient set and removes the standing entry with the same key for a
single materialization.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias, runtime_checkable

from sqlalchemy import Select

from pyrepo.kernel.exceptions import InvalidCriteriaError


@runtime_checkable
class RepositoryContext(Protocol):
    """What a criterion may read from the repository it is applied for."""

    @property
    def model(self) -> type[Any]: ...


@runtime_checkable
class Criterion(Protocol):
    """A self-contained, immutable query transformation."""

    def apply(self, query: Select[Any], repository: RepositoryContext) -> Select[Any]: ...


class AbstractCriterion(ABC):
    """Base class for criteria that do not need the repository context."""

    def apply(self, query: Select[Any], repository: RepositoryContext) -> Select[Any]:
        return self.apply_to_query(query)

    @abstractmethod
    def apply_to_query(self, query: Select[Any]) -> Select[Any]: ...


@dataclass(frozen=True)
class Suppress:
    """Tombstone: hide the standing criterion stored under *key* once."""

    key: str


CriteriaEntry: TypeAlias = Criterion | Suppress


def resolve_column(model: type[Any], name: str) -> Any:
    """Return the mapped attribute *name* of *model*."""
    column = getattr(model, name, None)
    if column is None:
        raise InvalidCriteriaError(
            f"Column '{name}' does not exist on model {model.__name__}",
            context={"model": model.__name__, "column": name},
        )
    return column
