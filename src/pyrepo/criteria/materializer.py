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
"""Fold an effective criteria list onto a fresh base query."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from sqlalchemy import Select

from pyrepo.criteria.base import Criterion, RepositoryContext

BaseQueryFactory = Callable[[], Select[Any]]


def apply_criteria(
    criteria: Iterable[Criterion],
    base_query_factory: BaseQueryFactory,
    repository: RepositoryContext,
) -> Select[Any]:
    """Apply *criteria* left to right to ``base_query_factory()``.

    Errors raised by a criterion propagate unchanged; no partially
    transformed statement is returned.
    """
    query = base_query_factory()
    for criterion in criteria:
        query = criterion.apply(query, repository)
    return query
