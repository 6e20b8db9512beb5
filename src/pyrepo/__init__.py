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
"""pyrepo — criteria-driven repositories for SQLAlchemy.

Queries are shaped by *criteria*: small immutable rules pushed onto a
repository, either for every coming query or for the next one only, keyed
so they can later be overridden or suppressed. The criteria engine rebuilds
the statement only when the effective criteria changed.

Modules:
    - ``pyrepo.criteria`` — criterion contract, ordered criteria sets, engine.
    - ``pyrepo.criteria.common`` — built-in criteria.
    - ``pyrepo.repository`` — ``BaseRepository`` and ``ExtendedRepository``.
"""

from pyrepo.core.config import Config, config_properties
from pyrepo.criteria import (
    AbstractCriterion,
    CriteriaEngine,
    CriteriaKey,
    CriteriaSet,
    Criterion,
    Suppress,
    apply_criteria,
)
from pyrepo.criteria.common import FieldIsValue, IsActive, OrderBy, Scopes, Take, UseCache, WithRelations
from pyrepo.kernel.exceptions import (
    CriteriaException,
    InvalidCallbackError,
    InvalidCriteriaError,
    InvalidCriteriaKeyError,
    InvalidScopeError,
    ModelNotFoundException,
    PyRepoException,
    RepositoryException,
)
from pyrepo.logging import configure_logging
from pyrepo.repository import BaseRepository, ExtendedRepository, Page, RepositorySettings

__version__ = "0.1.0"

__all__ = [
    # Criteria
    "AbstractCriterion",
    "CriteriaEngine",
    "CriteriaKey",
    "CriteriaSet",
    "Criterion",
    "Suppress",
    "apply_criteria",
    # Built-in criteria
    "FieldIsValue",
    "IsActive",
    "OrderBy",
    "Scopes",
    "Take",
    "UseCache",
    "WithRelations",
    # Repositories
    "BaseRepository",
    "ExtendedRepository",
    "Page",
    "RepositorySettings",
    # Configuration
    "Config",
    "config_properties",
    "configure_logging",
    # Exceptions
    "CriteriaException",
    "InvalidCallbackError",
    "InvalidCriteriaError",
    "InvalidCriteriaKeyError",
    "InvalidScopeError",
    "ModelNotFoundException",
    "PyRepoException",
    "RepositoryException",
]
