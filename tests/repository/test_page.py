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
"""Tests for Page metadata."""

from pyrepo.repository.page import Page


class TestPage:
    def test_partial_last_page(self):
        page = Page(items=["k"], total=11, per_page=5, current_page=3)
        assert page.last_page == 3
        assert page.from_item == 11
        assert page.to_item == 11
        assert not page.has_more_pages

    def test_empty_result(self):
        page = Page(items=[], total=0, per_page=15, current_page=1)
        assert page.last_page == 1
        assert page.from_item is None
        assert page.to_item is None
        assert not page.has_more_pages

    def test_map_keeps_metadata(self):
        page = Page(items=[1, 2], total=4, per_page=2, current_page=1).map(str)
        assert page.items == ["1", "2"]
        assert page.total == 4
        assert page.has_more_pages
