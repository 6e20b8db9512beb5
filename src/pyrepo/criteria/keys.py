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
"""Reserved keys for criteria derived from repository settings."""

from __future__ import annotations

from enum import StrEnum


class CriteriaKey(StrEnum):
    """Standing-set keys owned by the settings synchronisation.

    Pushing a criterion under one of these keys works, but the next
    settings change will overwrite or remove it.
    """

    ACTIVE = "active"
    CACHE = "cache"
    SCOPE = "scope"
