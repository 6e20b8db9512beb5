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
"""Apply named scopes defined on the entity class."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select

from pyrepo.criteria.base import RepositoryContext
from pyrepo.kernel.exceptions import InvalidScopeError

SCOPE_PREFIX = "scope_"

ScopeSpec = tuple[str, tuple[Any, ...]]


@dataclass(frozen=True, init=False)
class Scopes:
    """Call ``(scope_name, parameters)`` pairs on the query, in order.

    A scope named ``published`` is the class- or static method
    ``scope_published(query, *parameters)`` of the repository's entity::

        class Post(BaseEntity):
            @classmethod
            def scope_published(cls, query):
                return query.where(cls.published == True)

    Entries may be given as bare names or ``(name, parameters)`` pairs.
    """

    scopes: tuple[ScopeSpec, ...]

    def __init__(self, scopes: Iterable[str | tuple[str, Sequence[Any]]]) -> None:
        normalised: list[ScopeSpec] = []
        for entry in scopes:
            if isinstance(entry, str):
                normalised.append((entry, ()))
            else:
                name, parameters = entry
                normalised.append((name, tuple(parameters)))
        object.__setattr__(self, "scopes", tuple(normalised))

    @classmethod
    def named(cls, name: str, *parameters: Any) -> Scopes:
        """A criterion applying the single scope *name*."""
        return cls([(name, parameters)])

    def apply(self, query: Select[Any], repository: RepositoryContext) -> Select[Any]:
        model = repository.model
        for name, parameters in self.scopes:
            scope = getattr(model, f"{SCOPE_PREFIX}{name}", None)
            if not callable(scope):
                raise InvalidScopeError(name, model)
            query = scope(query, *parameters)
        return query
