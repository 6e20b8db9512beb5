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
"""Ready-made criteria for common query restrictions."""

from pyrepo.criteria.common.field_is_value import FieldIsValue
from pyrepo.criteria.common.is_active import IsActive
from pyrepo.criteria.common.order_by import OrderBy
from pyrepo.criteria.common.scopes import Scopes
from pyrepo.criteria.common.take import Take
from pyrepo.criteria.common.use_cache import CACHE_DEFAULT_TTL, CACHE_TTL_OPTION, UseCache
from pyrepo.criteria.common.with_relations import WithRelations

__all__ = [
    "CACHE_DEFAULT_TTL",
    "CACHE_TTL_OPTION",
    "FieldIsValue",
    "IsActive",
    "OrderBy",
    "Scopes",
    "Take",
    "UseCache",
    "WithRelations",
]
