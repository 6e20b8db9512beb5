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
"""Mark a query as cacheable for the execution layer."""

from __future__ import annotations

from dataclasses import InitVar, dataclass
from typing import Any

from sqlalchemy import Select

from pyrepo.core.config import Config
from pyrepo.criteria.base import AbstractCriterion

CACHE_DEFAULT_TTL = 15
CACHE_TTL_KEY = "pyrepo.cache.ttl"
CACHE_TTL_OPTION = "pyrepo_cache_ttl"


@dataclass(frozen=True)
class UseCache(AbstractCriterion):
    """Attach a cache TTL (minutes) as the ``pyrepo_cache_ttl`` execution option.

    The TTL is settled at construction: an explicit value wins, then
    ``pyrepo.cache.ttl`` from *config*, then :data:`CACHE_DEFAULT_TTL`.
    Honouring the option is up to whatever executes the statement.
    """

    time_to_live: int | None = None
    config: InitVar[Config | None] = None

    def __post_init__(self, config: Config | None) -> None:
        if self.time_to_live:
            return
        configured = config.get(CACHE_TTL_KEY) if config is not None else None
        object.__setattr__(self, "time_to_live", int(configured) if configured else CACHE_DEFAULT_TTL)

    def apply_to_query(self, query: Select[Any]) -> Select[Any]:
        return query.execution_options(**{CACHE_TTL_OPTION: self.time_to_live})
