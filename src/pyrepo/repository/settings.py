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
"""Repository settings and the criteria they imply.

Three settings each own one reserved standing key:

========================================  ====================
Setting                                   Standing key
========================================  ====================
active filtering (unless inactive shown)  ``CriteriaKey.ACTIVE``
caching                                   ``CriteriaKey.CACHE``
one or more scopes                        ``CriteriaKey.SCOPE``
========================================  ====================

:func:`sync_setting_criteria` brings the engine's standing set in line with
a :class:`RepositorySettings` instance and must run after every change.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel, Field

from pyrepo.core.config import config_properties
from pyrepo.criteria.base import Criterion
from pyrepo.criteria.common.is_active import IsActive
from pyrepo.criteria.common.scopes import Scopes, ScopeSpec
from pyrepo.criteria.common.use_cache import UseCache
from pyrepo.criteria.engine import CriteriaEngine
from pyrepo.criteria.keys import CriteriaKey

logger = structlog.get_logger(__name__)


@config_properties(prefix="pyrepo.repository")
class RepositoryProperties(BaseModel):
    """Global repository configuration (``pyrepo.repository.*``)."""

    per_page: int = Field(default=15, ge=1)


@dataclass
class RepositorySettings:
    """Mutable per-repository flags that drive setting-derived criteria.

    Scopes are kept in registration order; each scope name appears once and
    re-adding it only replaces its parameters.
    """

    has_active: bool = False
    active_column: str = "active"
    include_inactive: bool = False
    enable_cache: bool = False
    cache_ttl: int | None = None
    scopes: dict[str, tuple[Any, ...]] = field(default_factory=dict)

    @property
    def filters_active(self) -> bool:
        return self.has_active and not self.include_inactive

    def add_scope(self, name: str, parameters: Sequence[Any] = ()) -> None:
        self.scopes[name] = tuple(parameters)

    def remove_scope(self, name: str) -> None:
        self.scopes.pop(name, None)

    def clear_scopes(self) -> None:
        self.scopes.clear()

    def scope_pairs(self) -> list[ScopeSpec]:
        return list(self.scopes.items())


def default_cache_criterion(settings: RepositorySettings) -> Criterion:
    return UseCache(settings.cache_ttl)


def default_scopes_criterion(settings: RepositorySettings) -> Criterion:
    return Scopes(settings.scope_pairs())


def sync_setting_criteria(
    engine: CriteriaEngine,
    settings: RepositorySettings,
    make_cache: Callable[[RepositorySettings], Criterion] = default_cache_criterion,
    make_scopes: Callable[[RepositorySettings], Criterion] = default_scopes_criterion,
) -> None:
    """Upsert or remove the ``ACTIVE``, ``CACHE`` and ``SCOPE`` standing criteria.

    Writes go through the engine's standing-set operations only; once
    criteria are never touched.
    """
    if settings.filters_active:
        engine.push_standing(IsActive(settings.active_column), CriteriaKey.ACTIVE)
    else:
        engine.remove_standing(CriteriaKey.ACTIVE)

    if settings.enable_cache:
        engine.push_standing(make_cache(settings), CriteriaKey.CACHE)
    else:
        engine.remove_standing(CriteriaKey.CACHE)

    if settings.scopes:
        engine.push_standing(make_scopes(settings), CriteriaKey.SCOPE)
    else:
        engine.remove_standing(CriteriaKey.SCOPE)

    logger.debug(
        "criteria.settings_synced",
        active=settings.filters_active,
        cache=settings.enable_cache,
        scopes=list(settings.scopes),
    )
