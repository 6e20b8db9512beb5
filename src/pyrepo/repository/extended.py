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
"""Repository with setting-driven criteria: active filtering, caching and scopes.

Settings are declared on the subclass and can be toggled per instance::

    class PostRepository(ExtendedRepository[Post]):
        has_active = True
        cache_enabled = True
        default_scopes = ("published", ("by_author", ("alice",)))

    repo = PostRepository(session)
    await repo.maintenance().all()      # inactive included, no caching
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, ClassVar, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from pyrepo.core.config import Config
from pyrepo.criteria.base import Criterion
from pyrepo.criteria.common.scopes import Scopes
from pyrepo.criteria.common.use_cache import UseCache
from pyrepo.criteria.criteria_set import CriteriaSet
from pyrepo.repository.base import BaseRepository
from pyrepo.repository.settings import RepositorySettings, sync_setting_criteria

T = TypeVar("T")


class ExtendedRepository(BaseRepository[T]):
    """BaseRepository whose standing criteria follow its settings.

    Class attributes give the initial settings:

    * ``has_active`` / ``active_column``: the entity has a boolean active
      flag; only active records are returned unless inactive ones are
      included.
    * ``inactive_included``: start with inactive records included.
    * ``cache_enabled`` / ``cache_ttl``: attach the cache directive; a
      ``None`` TTL falls back to ``pyrepo.cache.ttl``.
    * ``default_scopes``: scope names or ``(name, parameters)`` pairs.
    """

    has_active: ClassVar[bool] = False
    active_column: ClassVar[str] = "active"
    inactive_included: ClassVar[bool] = False
    cache_enabled: ClassVar[bool] = False
    cache_ttl: ClassVar[int | None] = None
    default_scopes: ClassVar[Sequence[str | tuple[str, Sequence[Any]]]] = ()

    def __init__(
        self,
        session: AsyncSession | None = None,
        model: type[T] | None = None,
        criteria: CriteriaSet[Criterion] | None = None,
        config: Config | None = None,
    ) -> None:
        super().__init__(session, model, criteria, config)
        self.settings = RepositorySettings(
            has_active=self.has_active,
            active_column=self.active_column,
            include_inactive=self.inactive_included,
            enable_cache=self.cache_enabled,
            cache_ttl=self.cache_ttl,
        )
        for entry in self.default_scopes:
            if isinstance(entry, str):
                self.settings.add_scope(entry)
            else:
                self.settings.add_scope(*entry)
        self.refresh_setting_dependent_criteria()

    def refresh_setting_dependent_criteria(self) -> ExtendedRepository[T]:
        sync_setting_criteria(
            self._criteria,
            self.settings,
            make_cache=lambda _: self.get_cache_criteria_instance(),
            make_scopes=lambda _: self.get_scopes_criteria_instance(),
        )
        return self

    def restore_default_criteria(self) -> ExtendedRepository[T]:
        super().restore_default_criteria()
        return self.refresh_setting_dependent_criteria()

    def get_cache_criteria_instance(self) -> Criterion:
        """Criterion stored under ``CriteriaKey.CACHE``. Override to swap the caching strategy."""
        return UseCache(self.settings.cache_ttl, config=self.config)

    def get_scopes_criteria_instance(self) -> Criterion:
        """Criterion stored under ``CriteriaKey.SCOPE``."""
        return Scopes(self.settings.scope_pairs())

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def add_scope(self, scope: str, parameters: Sequence[Any] = ()) -> ExtendedRepository[T]:
        """Apply scope *scope* to all coming queries.

        A scope is registered once; adding it again replaces its parameters.
        """
        self.settings.add_scope(scope, parameters)
        return self.refresh_setting_dependent_criteria()

    def remove_scope(self, scope: str) -> ExtendedRepository[T]:
        self.settings.remove_scope(scope)
        return self.refresh_setting_dependent_criteria()

    def clear_scopes(self) -> ExtendedRepository[T]:
        self.settings.clear_scopes()
        return self.refresh_setting_dependent_criteria()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def maintenance(self, enable: bool = True) -> ExtendedRepository[T]:
        """Maintenance mode: inactive records included and caching off."""
        return self.include_inactive(enable).enable_cache(not enable)

    def include_inactive(self, enable: bool = True) -> ExtendedRepository[T]:
        self.settings.include_inactive = enable
        return self.refresh_setting_dependent_criteria()

    def exclude_inactive(self) -> ExtendedRepository[T]:
        return self.include_inactive(False)

    def is_inactive_included(self) -> bool:
        return self.settings.include_inactive

    def enable_cache(self, enable: bool = True) -> ExtendedRepository[T]:
        self.settings.enable_cache = enable
        return self.refresh_setting_dependent_criteria()

    def disable_cache(self) -> ExtendedRepository[T]:
        return self.enable_cache(False)

    def is_cache_enabled(self) -> bool:
        return self.settings.enable_cache

    async def activate_record(self, id: Any, active: bool = True) -> bool:
        """Set the active flag of record *id*, regardless of criteria.

        Returns ``False`` when the entity has no active flag or no record matched.
        """
        if not self.settings.has_active:
            return False
        session = self._require_session()
        entity = await session.get(self._model, id)
        if entity is None:
            return False
        setattr(entity, self.settings.active_column, active)
        await session.flush()
        return True
