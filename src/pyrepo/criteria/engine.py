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
"""Criteria composition engine.

The engine owns three criteria sets:

* **standing** criteria, applied to every query until removed;
* **once** criteria, applied to the next materialization only and then
  discarded (this is also where :class:`~pyrepo.criteria.base.Suppress`
  tombstones live);
* the **active** snapshot, the effective list applied by the last
  successful materialization.

On :meth:`CriteriaEngine.materialize` the engine either hands back the
statement it built last time (nothing changed since) or rebuilds it from a
fresh base query.

An engine belongs to a single repository and is not safe for concurrent
mutation; callers sharing a repository between tasks or threads must
serialise access themselves.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import Select

from pyrepo.criteria.base import CriteriaEntry, Criterion, RepositoryContext, Suppress
from pyrepo.criteria.criteria_set import CriteriaSet, validate_key
from pyrepo.criteria.materializer import BaseQueryFactory, apply_criteria

logger = structlog.get_logger(__name__)


class CriteriaEngine:
    """Merges standing and once criteria and rebuilds queries only when needed.

    Args:
        standing: Initial standing criteria. The engine keeps its own copy.
    """

    def __init__(self, standing: CriteriaSet[Criterion] | None = None) -> None:
        self._standing: CriteriaSet[Criterion] = standing.copy() if standing is not None else CriteriaSet()
        self._once: CriteriaSet[CriteriaEntry] = CriteriaSet()
        self._active: CriteriaSet[Criterion] | None = None
        self._query: Select[Any] | None = None
        self._ignoring = False

    # ------------------------------------------------------------------
    # Standing criteria
    # ------------------------------------------------------------------

    def push_standing(self, criterion: Criterion, key: str | None = None) -> None:
        """Append *criterion*, or store it under *key* replacing any existing one.

        Does not touch once criteria, even those stored under the same key.
        """
        if key is None:
            self._standing.push(criterion)
        else:
            self._standing.put(key, criterion)
        logger.debug("criteria.pushed", key=key, criterion=repr(criterion))

    def remove_standing(self, key: str) -> None:
        """Remove the standing criterion stored under *key*, if any."""
        self._standing.forget(validate_key(key))
        logger.debug("criteria.removed", key=key)

    def replace_standing(self, criteria: CriteriaSet[Criterion]) -> None:
        """Swap the whole standing set for a copy of *criteria*."""
        self._standing = criteria.copy()

    # ------------------------------------------------------------------
    # Once criteria
    # ------------------------------------------------------------------

    def push_once(self, criterion: Criterion, key: str | None = None) -> None:
        """Like :meth:`push_standing`, but only for the next materialization.

        A keyed once criterion overrides the standing criterion with the same
        key in place; an unkeyed one is applied after all standing criteria.
        """
        if key is None:
            self._once.push(criterion)
        else:
            self._once.put(key, criterion)
        logger.debug("criteria.pushed_once", key=key, criterion=repr(criterion))

    def remove_once(self, key: str) -> None:
        """Leave out the standing criterion under *key* for the next materialization.

        Nothing happens when no standing criterion uses *key*.
        """
        if not self._standing.has(validate_key(key)):
            return
        self._once.put(key, Suppress(key))
        logger.debug("criteria.suppressed_once", key=key)

    # ------------------------------------------------------------------
    # Ignoring
    # ------------------------------------------------------------------

    @property
    def ignoring(self) -> bool:
        return self._ignoring

    def ignore_all(self, ignore: bool = True) -> None:
        """Toggle criteria-free materialization.

        Leaving ignore mode drops the active snapshot so the next
        materialization re-applies the criteria.
        """
        if self._ignoring and not ignore:
            self.invalidate()
        self._ignoring = ignore

    def invalidate(self) -> None:
        """Forget what was applied last, forcing the next materialization to rebuild."""
        self._active = None
        self._query = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_standing(self) -> CriteriaSet[Criterion]:
        return self._standing.copy()

    def get_once(self) -> CriteriaSet[CriteriaEntry]:
        return self._once.copy()

    def get_all(self) -> CriteriaSet[CriteriaEntry]:
        """Standing criteria with once criteria laid over them, tombstones included."""
        standing: CriteriaSet[CriteriaEntry] = self._standing.copy()  # type: ignore[assignment]
        return standing.merge(self._once)

    def get_active(self) -> CriteriaSet[Criterion] | None:
        return self._active.copy() if self._active is not None else None

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def effective_criteria(self) -> CriteriaSet[Criterion]:
        """The criteria the next materialization applies, in application order."""
        effective = self._standing.copy()
        for key, entry in self._once.items():
            if isinstance(key, int):
                if not isinstance(entry, Suppress):
                    effective.push(entry)
            elif entry is None or isinstance(entry, Suppress):
                effective.forget(key)
            else:
                effective.put(key, entry)
        return effective

    def is_unchanged(self) -> bool:
        """Whether the last built statement still reflects the criteria."""
        return (
            not self._once
            and self._query is not None
            and self._active is not None
            and self._standing == self._active
        )

    def materialize(self, base_query_factory: BaseQueryFactory, repository: RepositoryContext) -> Select[Any]:
        """Return the statement to execute, rebuilding it only when criteria changed.

        Once criteria are consumed even when a criterion raises; the active
        snapshot is only recorded after every criterion applied cleanly.
        """
        if self._ignoring:
            self.invalidate()
            return base_query_factory()

        if self.is_unchanged():
            logger.debug("criteria.unchanged", model=_model_name(repository))
            return self._query  # type: ignore[return-value]

        effective = self.effective_criteria()
        self.invalidate()
        try:
            query = apply_criteria(effective, base_query_factory, repository)
        finally:
            self._once = CriteriaSet()

        self._active = effective
        self._query = query
        logger.debug("criteria.materialized", model=_model_name(repository), applied=len(effective))
        return query


def _model_name(repository: RepositoryContext) -> str:
    model = getattr(repository, "model", None)
    return model.__name__ if isinstance(model, type) else type(repository).__name__
