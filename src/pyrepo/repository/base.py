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
"""Async repository whose queries are shaped by keyed, composable criteria.

Every retrieval method starts from :meth:`BaseRepository.query`, which asks
the repository's :class:`~pyrepo.criteria.engine.CriteriaEngine` for the
current statement. Criteria can be pushed permanently or for one call only,
overridden or suppressed by key, or ignored altogether::

    class PostRepository(BaseRepository[Post]):
        def default_criteria(self) -> CriteriaSet[Criterion]:
            return CriteriaSet([("order", OrderBy("created_at", "desc"))])

    repo = PostRepository(session)
    latest = await repo.push_criteria_once(Take(5)).all()
    oldest = await repo.push_criteria_once(OrderBy("created_at"), "order").first()
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar, cast, get_args, get_origin

import structlog
from sqlalchemy import Select, func, inspect, select
from sqlalchemy import delete as sa_delete
from sqlalchemy import or_ as sa_or
from sqlalchemy.ext.asyncio import AsyncSession

from pyrepo.core.config import Config
from pyrepo.criteria.base import CriteriaEntry, Criterion, resolve_column
from pyrepo.criteria.common.field_is_value import compare
from pyrepo.criteria.criteria_set import CriteriaSet
from pyrepo.criteria.engine import CriteriaEngine
from pyrepo.kernel.exceptions import InvalidCallbackError, ModelNotFoundException, RepositoryException
from pyrepo.repository.page import Page
from pyrepo.repository.settings import RepositoryProperties

T = TypeVar("T")

logger = structlog.get_logger(__name__)

QueryCallback = Callable[[Select[Any]], Select[Any]]


class BaseRepository(Generic[T]):
    """Criteria-driven data access for one SQLAlchemy entity.

    Type Parameters:
        T: The entity type.

    Args:
        session: Session used for execution; retrieval fails without one.
        model: Entity class, unless declared as ``BaseRepository[Entity]``.
        criteria: Initial standing criteria; when empty,
            :meth:`default_criteria` is used.
        config: Configuration; defaults to the packaged defaults.
    """

    _entity_type: type | None = None

    #: Page size for :meth:`paginate`; ``None`` defers to ``pyrepo.repository.per_page``.
    per_page: int | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            origin = get_origin(base)
            if isinstance(origin, type) and issubclass(origin, BaseRepository):
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls._entity_type = args[0]
                break

    def __init__(
        self,
        session: AsyncSession | None = None,
        model: type[T] | None = None,
        criteria: CriteriaSet[Criterion] | None = None,
        config: Config | None = None,
    ) -> None:
        resolved = model or getattr(type(self), "_entity_type", None)
        if resolved is None:
            raise RepositoryException(
                f"{type(self).__name__} requires either a BaseRepository[Entity] declaration or an explicit model"
            )
        self._model: type[T] = cast(type[T], resolved)
        self._session = session
        self._config = config if config is not None else Config.defaults()
        self._properties = self._config.bind(RepositoryProperties)
        if not criteria:
            criteria = self.default_criteria()
        self._criteria = CriteriaEngine(criteria)

    @property
    def model(self) -> type[T]:
        return self._model

    @property
    def config(self) -> Config:
        return self._config

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RepositoryException(f"No AsyncSession configured for {type(self).__name__}")
        return self._session

    def _primary_key(self) -> Any:
        return inspect(self._model).primary_key[0]

    def make_query(self) -> Select[Any]:
        """A fresh SELECT for the entity with no criteria applied."""
        return select(self._model)

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    def default_criteria(self) -> CriteriaSet[Criterion]:
        """Standing criteria a new repository starts with. Override to add your own."""
        return CriteriaSet()

    def restore_default_criteria(self) -> BaseRepository[T]:
        self._criteria.replace_standing(self.default_criteria())
        return self

    def clear_criteria(self) -> BaseRepository[T]:
        self._criteria.replace_standing(CriteriaSet())
        return self

    def ignore_criteria(self, ignore: bool = True) -> BaseRepository[T]:
        self._criteria.ignore_all(ignore)
        return self

    def push_criteria(self, criterion: Criterion, key: str | None = None) -> BaseRepository[T]:
        """Apply *criterion* to all coming queries, optionally under *key*.

        Does not override once criteria, even under the same key.
        """
        self._criteria.push_standing(criterion, key)
        return self

    def remove_criteria(self, key: str) -> BaseRepository[T]:
        self._criteria.remove_standing(key)
        return self

    def push_criteria_once(self, criterion: Criterion, key: str | None = None) -> BaseRepository[T]:
        """Apply *criterion* to the next query only; a *key* overrides the standing one."""
        self._criteria.push_once(criterion, key)
        return self

    def remove_criteria_once(self, key: str) -> BaseRepository[T]:
        """Skip the standing criterion under *key* for the next query only."""
        self._criteria.remove_once(key)
        return self

    def get_criteria(self) -> CriteriaSet[Criterion]:
        return self._criteria.get_standing()

    def get_once_criteria(self) -> CriteriaSet[CriteriaEntry]:
        return self._criteria.get_once()

    def get_all_criteria(self) -> CriteriaSet[CriteriaEntry]:
        return self._criteria.get_all()

    def apply_criteria(self) -> Select[Any]:
        return self._criteria.materialize(self.make_query, self)

    def query(self) -> Select[Any]:
        """The criteria-shaped statement that retrieval methods build on.

        Consumes once criteria.
        """
        return self.apply_criteria()

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def _scalars(self, stmt: Select[Any]) -> list[T]:
        result = await self._require_session().execute(stmt)
        return list(result.scalars().all())

    async def _first(self, stmt: Select[Any]) -> T | None:
        result = await self._require_session().execute(stmt.limit(1))
        return result.scalars().first()

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.query().order_by(None).subquery())
        result = await self._require_session().execute(stmt)
        return result.scalar_one()

    async def first(self) -> T | None:
        return await self._first(self.query())

    async def first_or_fail(self) -> T:
        result = await self.first()
        if result is None:
            raise ModelNotFoundException(self._model)
        return result

    async def all(self) -> list[T]:
        return await self._scalars(self.query())

    async def pluck(self, value: str, key: str | None = None) -> list[Any] | dict[Any, Any]:
        """Values of column *value*, or a ``{key: value}`` dict when *key* is given."""
        value_column = resolve_column(self._model, value)
        query = self.query()
        session = self._require_session()
        if key is None:
            result = await session.execute(query.with_only_columns(value_column))
            return list(result.scalars().all())
        key_column = resolve_column(self._model, key)
        result = await session.execute(query.with_only_columns(key_column, value_column))
        return {row[0]: row[1] for row in result.all()}

    async def paginate(self, per_page: int | None = None, page: int = 1) -> Page[T]:
        """Fetch page *page* (1-based) of the criteria-shaped query.

        The page window replaces any limit or offset set by criteria such as
        ``Take``, and the total counts every matching record.
        """
        if per_page is None:
            per_page = self.get_default_per_page()
        elif per_page < 1:
            raise ValueError(f"per_page must be at least 1, got {per_page}")
        page = max(page, 1)
        query = self.query()
        session = self._require_session()

        count_stmt = select(func.count()).select_from(query.limit(None).offset(None).order_by(None).subquery())
        total = (await session.execute(count_stmt)).scalar_one()

        items = await self._scalars(query.offset((page - 1) * per_page).limit(per_page))
        return Page(items=items, total=total, per_page=per_page, current_page=page)

    async def find(self, id: Any, attribute: str | None = None) -> T | None:
        """Find by primary key, or by *attribute* when given."""
        column = self._primary_key() if attribute is None else resolve_column(self._model, attribute)
        return await self._first(self.query().where(column == id))

    async def find_or_fail(self, id: Any) -> T:
        result = await self.find(id)
        if result is None:
            raise ModelNotFoundException(self._model, id)
        return result

    async def find_by(self, attribute: str, value: Any) -> T | None:
        return await self._first(self.query().where(resolve_column(self._model, attribute) == value))

    async def find_all_by(self, attribute: str, value: Any) -> list[T]:
        return await self._scalars(self.query().where(resolve_column(self._model, attribute) == value))

    async def find_where(self, where: Mapping[str, Any] | Iterable[Any], or_: bool = False) -> list[T]:
        """Find records matching a set of conditions.

        *where* is either a mapping of ``field: value`` or an iterable of
        ``(field, value)`` / ``(field, operator, value)`` tuples. A mapping
        value may itself be such a tuple. Callables receive the entity class
        and return a clause. Conditions are AND-ed, or OR-ed with ``or_=True``.
        """
        entries = list(where.items()) if isinstance(where, Mapping) else [(None, entry) for entry in where]
        clauses = [self._where_clause(field, value) for field, value in entries]
        query = self.query()
        if clauses:
            query = query.where(sa_or(*clauses)) if or_ else query.where(*clauses)
        return await self._scalars(query)

    def _where_clause(self, field: str | None, value: Any) -> Any:
        if callable(value):
            return value(self._model)
        if isinstance(value, (tuple, list)) and len(value) == 3:
            name, op, search = value
            return compare(resolve_column(self._model, name), op, search)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            name, search = value
            return resolve_column(self._model, name) == search
        if field is None:
            raise ValueError(f"Cannot build a condition from {value!r}")
        return resolve_column(self._model, field) == value

    async def all_callback(self, callback: QueryCallback) -> list[T]:
        """Run ``callback(query())`` and return all results.

        The callback must return a SELECT statement.
        """
        return await self._scalars(self._check_callback(callback(self.query())))

    async def find_callback(self, callback: QueryCallback) -> T | None:
        return await self._first(self._check_callback(callback(self.query())))

    @staticmethod
    def _check_callback(result: Any) -> Select[Any]:
        if not isinstance(result, Select):
            raise InvalidCallbackError(
                "Query callbacks must return a SELECT statement",
                context={"returned": type(result).__name__},
            )
        return result

    # ------------------------------------------------------------------
    # Manipulation
    # ------------------------------------------------------------------

    def make(self, data: Mapping[str, Any]) -> T:
        """Build an unsaved entity from *data*."""
        return self._model(**data)

    async def save(self, entity: T) -> T:
        """Persist *entity*, new or already loaded, and flush it."""
        session = self._require_session()
        session.add(entity)
        await session.flush()
        return entity

    async def create(self, data: Mapping[str, Any]) -> T:
        entity = await self.save(self.make(data))
        await self._require_session().refresh(entity)
        return entity

    async def fill(self, data: Mapping[str, Any], id: Any, attribute: str | None = None) -> T:
        """Assign *data* to the matching entity without flushing it."""
        entity = await self.find(id, attribute)
        if entity is None:
            raise ModelNotFoundException(self._model, id)
        self._assign(entity, data)
        return entity

    async def update(self, data: Mapping[str, Any], id: Any, attribute: str | None = None) -> bool:
        """Assign *data* to the matching entity and flush; ``False`` when nothing matched."""
        entity = await self.find(id, attribute)
        if entity is None:
            return False
        self._assign(entity, data)
        await self._require_session().flush()
        return True

    async def delete(self, id: Any) -> int:
        """Delete by primary key (or list of keys), bypassing criteria.

        Returns the number of deleted rows.
        """
        ids = list(id) if isinstance(id, (list, tuple, set)) else [id]
        if not ids:
            return 0
        session = self._require_session()
        result = await session.execute(sa_delete(self._model).where(self._primary_key().in_(ids)))
        await session.flush()
        deleted = cast(int, result.rowcount)  # type: ignore[attr-defined]
        logger.debug("repository.deleted", model=self._model.__name__, count=deleted)
        return deleted

    @staticmethod
    def _assign(entity: Any, data: Mapping[str, Any]) -> None:
        for key, value in data.items():
            if not hasattr(entity, key):
                raise ValueError(f"'{key}' is not an attribute of {type(entity).__name__}")
            setattr(entity, key, value)

    def get_default_per_page(self) -> int:
        if self.per_page is not None and self.per_page > 0:
            return self.per_page
        return self._properties.per_page
