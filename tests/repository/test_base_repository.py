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
"""Tests for BaseRepository — criteria-shaped retrieval and manipulation."""

from __future__ import annotations

import pytest
from sqlalchemy import String, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from pyrepo.core.config import Config
from pyrepo.criteria.base import Criterion
from pyrepo.criteria.common import FieldIsValue, OrderBy, Take
from pyrepo.criteria.criteria_set import CriteriaSet
from pyrepo.kernel.exceptions import (
    InvalidCallbackError,
    ModelNotFoundException,
    RepositoryException,
)
from pyrepo.repository.base import BaseRepository
from pyrepo.repository.page import Page

# ---------------------------------------------------------------------------
# Test entity and repositories
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Product(Base):
    __tablename__ = "repo_products"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    category: Mapped[str] = mapped_column(String(50))
    price: Mapped[int] = mapped_column(default=0)


class ProductRepository(BaseRepository[Product]):
    def default_criteria(self) -> CriteriaSet[Criterion]:
        return CriteriaSet([("order", OrderBy("name"))])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        session.add_all(
            [
                Product(id=1, name="Chair", category="furniture", price=40),
                Product(id=2, name="Apple", category="food", price=1),
                Product(id=3, name="Desk", category="furniture", price=120),
                Product(id=4, name="Bread", category="food", price=3),
                Product(id=5, name="Lamp", category="lighting", price=25),
            ]
        )
        await session.flush()
        yield session


@pytest.fixture
def repo(session: AsyncSession) -> ProductRepository:
    return ProductRepository(session)


def _names(products: list[Product]) -> list[str]:
    return [p.name for p in products]


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_model_from_generic_declaration(self, repo):
        assert repo.model is Product

    def test_explicit_model(self, session):
        assert BaseRepository(session, model=Product).model is Product

    def test_missing_model_raises(self):
        with pytest.raises(RepositoryException):
            BaseRepository()

    def test_default_criteria_used_when_none_given(self, repo):
        assert repo.get_criteria().values() == [OrderBy("name")]

    def test_given_criteria_replace_defaults(self, session):
        repo = ProductRepository(session, criteria=CriteriaSet.of(Take(1)))
        assert repo.get_criteria().values() == [Take(1)]

    @pytest.mark.asyncio
    async def test_missing_session_raises_on_execution(self):
        with pytest.raises(RepositoryException):
            await ProductRepository().all()


# ---------------------------------------------------------------------------
# Criteria handling
# ---------------------------------------------------------------------------


class TestCriteria:
    @pytest.mark.asyncio
    async def test_default_criteria_apply(self, repo):
        assert _names(await repo.all()) == ["Apple", "Bread", "Chair", "Desk", "Lamp"]

    @pytest.mark.asyncio
    async def test_pushed_criteria_persist(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"))
        assert _names(await repo.all()) == ["Apple", "Bread"]
        assert _names(await repo.all()) == ["Apple", "Bread"]

    @pytest.mark.asyncio
    async def test_once_criteria_apply_to_next_call_only(self, repo):
        repo.push_criteria_once(FieldIsValue("category", "furniture"))
        assert _names(await repo.all()) == ["Chair", "Desk"]
        assert len(await repo.all()) == 5

    @pytest.mark.asyncio
    async def test_once_criteria_override_by_key(self, repo):
        repo.push_criteria_once(OrderBy("price", "desc"), "order")
        assert _names(await repo.all())[0] == "Desk"
        assert _names(await repo.all())[0] == "Apple"

    @pytest.mark.asyncio
    async def test_remove_criteria_once(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"), "category")
        repo.remove_criteria_once("category")
        assert await repo.count() == 5
        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_remove_criteria(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"), "category")
        repo.remove_criteria("category")
        assert await repo.count() == 5

    @pytest.mark.asyncio
    async def test_ignore_criteria(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"))
        repo.ignore_criteria()
        assert await repo.count() == 5
        repo.ignore_criteria(False)
        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_clear_and_restore_defaults(self, repo):
        repo.push_criteria(Take(1))
        repo.clear_criteria()
        assert len(repo.get_criteria()) == 0
        repo.restore_default_criteria()
        assert repo.get_criteria().values() == [OrderBy("name")]

    def test_query_is_reused_while_criteria_unchanged(self, repo):
        first = repo.query()
        assert repo.query() is first
        repo.push_criteria(Take(2))
        assert repo.query() is not first

    def test_get_all_criteria(self, repo):
        repo.push_criteria_once(Take(3))
        assert repo.get_all_criteria().values() == [OrderBy("name"), Take(3)]
        assert repo.get_once_criteria().values() == [Take(3)]


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------


class TestRetrieval:
    @pytest.mark.asyncio
    async def test_first(self, repo):
        first = await repo.first()
        assert first is not None
        assert first.name == "Apple"

    @pytest.mark.asyncio
    async def test_first_or_fail(self, repo):
        repo.push_criteria(FieldIsValue("category", "toys"))
        with pytest.raises(ModelNotFoundException):
            await repo.first_or_fail()

    @pytest.mark.asyncio
    async def test_count_respects_take(self, repo):
        repo.push_criteria_once(Take(2))
        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_find_by_primary_key(self, repo):
        product = await repo.find(3)
        assert product is not None
        assert product.name == "Desk"

    @pytest.mark.asyncio
    async def test_find_respects_criteria(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"))
        assert await repo.find(3) is None

    @pytest.mark.asyncio
    async def test_find_by_attribute(self, repo):
        product = await repo.find("Lamp", attribute="name")
        assert product is not None
        assert product.id == 5

    @pytest.mark.asyncio
    async def test_find_or_fail(self, repo):
        with pytest.raises(ModelNotFoundException) as exc_info:
            await repo.find_or_fail(99)
        assert exc_info.value.id == 99

    @pytest.mark.asyncio
    async def test_find_by_and_find_all_by(self, repo):
        product = await repo.find_by("category", "furniture")
        assert product is not None
        assert product.name == "Chair"
        assert _names(await repo.find_all_by("category", "furniture")) == ["Chair", "Desk"]

    @pytest.mark.asyncio
    async def test_find_where_mapping(self, repo):
        found = await repo.find_where({"category": "furniture", "price": ("price", ">", 50)})
        assert _names(found) == ["Desk"]

    @pytest.mark.asyncio
    async def test_find_where_tuples_or(self, repo):
        found = await repo.find_where([("category", "food"), ("name", "=", "Lamp")], or_=True)
        assert _names(found) == ["Apple", "Bread", "Lamp"]

    @pytest.mark.asyncio
    async def test_find_where_callable(self, repo):
        found = await repo.find_where({"cheap": lambda model: model.price < 5})
        assert _names(found) == ["Apple", "Bread"]

    @pytest.mark.asyncio
    async def test_pluck(self, repo):
        assert await repo.pluck("name") == ["Apple", "Bread", "Chair", "Desk", "Lamp"]
        assert await repo.pluck("price", key="name") == {
            "Apple": 1,
            "Bread": 3,
            "Chair": 40,
            "Desk": 120,
            "Lamp": 25,
        }

    @pytest.mark.asyncio
    async def test_paginate(self, repo):
        page = await repo.paginate(per_page=2, page=2)
        assert isinstance(page, Page)
        assert _names(page.items) == ["Chair", "Desk"]
        assert page.total == 5
        assert page.last_page == 3
        assert page.from_item == 3
        assert page.to_item == 4
        assert page.has_more_pages

    @pytest.mark.asyncio
    async def test_paginate_uses_configured_page_size(self, session):
        config = Config({"pyrepo": {"repository": {"per_page": 4}}})
        page = await ProductRepository(session, config=config).paginate()
        assert page.per_page == 4
        assert len(page.items) == 4

    @pytest.mark.asyncio
    async def test_paginate_uses_class_page_size(self, session):
        class SmallPages(ProductRepository):
            per_page = 1

        page = await SmallPages(session).paginate()
        assert page.per_page == 1
        assert page.last_page == 5

    @pytest.mark.asyncio
    async def test_paginate_overrides_take(self, repo):
        repo.push_criteria(Take(2))
        page = await repo.paginate(per_page=10)
        assert page.total == 5
        assert len(page.items) == 5
        assert page.last_page == 1
        assert page.to_item == page.total

    @pytest.mark.asyncio
    async def test_paginate_count_matches_filtered_items(self, repo):
        repo.push_criteria(FieldIsValue("category", "furniture"))
        repo.push_criteria(Take(1))
        page = await repo.paginate(per_page=1, page=2)
        assert page.total == 2
        assert _names(page.items) == ["Desk"]
        assert not page.has_more_pages

    @pytest.mark.asyncio
    @pytest.mark.parametrize("per_page", [0, -1])
    async def test_paginate_rejects_non_positive_page_size(self, repo, per_page):
        with pytest.raises(ValueError):
            await repo.paginate(per_page=per_page)

    @pytest.mark.asyncio
    async def test_all_callback(self, repo):
        found = await repo.all_callback(lambda q: q.where(Product.price > 30))
        assert _names(found) == ["Chair", "Desk"]

    @pytest.mark.asyncio
    async def test_find_callback(self, repo):
        found = await repo.find_callback(lambda q: q.where(Product.category == "lighting"))
        assert found is not None
        assert found.name == "Lamp"

    @pytest.mark.asyncio
    async def test_invalid_callback(self, repo):
        with pytest.raises(InvalidCallbackError):
            await repo.all_callback(lambda q: "SELECT 1")


# ---------------------------------------------------------------------------
# Manipulation
# ---------------------------------------------------------------------------


class TestManipulation:
    def test_make_does_not_persist(self, repo, session):
        product = repo.make({"name": "Rug", "category": "furniture"})
        assert product.name == "Rug"
        assert product not in session

    @pytest.mark.asyncio
    async def test_create(self, repo, session):
        product = await repo.create({"id": 6, "name": "Rug", "category": "furniture", "price": 70})
        stored = (await session.execute(select(Product).where(Product.id == 6))).scalar_one()
        assert stored is product

    @pytest.mark.asyncio
    async def test_save_new_entity(self, repo, session):
        product = repo.make({"id": 7, "name": "Vase", "category": "decor", "price": 15})
        assert await repo.save(product) is product
        assert product in session
        assert await repo.find_by("category", "decor") is product

    @pytest.mark.asyncio
    async def test_save_loaded_entity(self, repo, session):
        product = await repo.find_or_fail(2)
        product.price = 2
        await repo.save(product)
        stored = (await session.execute(select(Product.price).where(Product.id == 2))).scalar_one()
        assert stored == 2

    @pytest.mark.asyncio
    async def test_update(self, repo):
        assert await repo.update({"price": 45}, 1) is True
        product = await repo.find(1)
        assert product is not None
        assert product.price == 45

    @pytest.mark.asyncio
    async def test_update_by_attribute(self, repo):
        assert await repo.update({"price": 2}, "Apple", attribute="name") is True

    @pytest.mark.asyncio
    async def test_update_missing_returns_false(self, repo):
        assert await repo.update({"price": 1}, 99) is False

    @pytest.mark.asyncio
    async def test_update_unknown_attribute(self, repo):
        with pytest.raises(ValueError):
            await repo.update({"colour": "red"}, 1)

    @pytest.mark.asyncio
    async def test_fill(self, repo):
        product = await repo.fill({"name": "Armchair"}, 1)
        assert product.name == "Armchair"

    @pytest.mark.asyncio
    async def test_fill_missing_raises(self, repo):
        with pytest.raises(ModelNotFoundException):
            await repo.fill({"name": "Ghost"}, 99)

    @pytest.mark.asyncio
    async def test_delete(self, repo):
        assert await repo.delete(1) == 1
        assert await repo.delete([2, 3, 99]) == 2
        assert await repo.count() == 2

    @pytest.mark.asyncio
    async def test_delete_ignores_criteria(self, repo):
        repo.push_criteria(FieldIsValue("category", "food"))
        assert await repo.delete(5) == 1
