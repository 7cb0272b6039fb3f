"""Table rows, fetch-level views and the per-entity façade that ties them together."""

from __future__ import annotations

from typing import Any, ClassVar, Generic, Hashable, Mapping, Optional, Sequence, TypeVar

import asyncpg
from pydantic import BaseModel, ConfigDict

from club_registry.domain.common.exceptions import InternalServerError, NotFoundError
from club_registry.domain.common.fetch_level import Expansion, FetchLevel
from club_registry.domain.common.query_builder import QueryBuilder, TableSpec, from_envelope
from club_registry.domain.common.schemas import RequestEnvelope
from club_registry.obs import metrics as obs_metrics
from club_registry.settings import settings

RowT = TypeVar("RowT", bound="TableRow")


class TableRow(BaseModel):
	"""Flat, storage-shaped record. Never holds nested entities."""

	spec: ClassVar[TableSpec]

	model_config = ConfigDict(from_attributes=True)

	@property
	def key(self) -> Hashable:
		return getattr(self, "id")

	@classmethod
	def from_record(cls: type[RowT], record: Any) -> RowT:
		return cls.model_validate(dict(record))

	@classmethod
	async def get_by_id(cls: type[RowT], pool: asyncpg.Pool, entity_id: Any) -> Optional[RowT]:
		query = f"{cls.spec.select} WHERE {cls.spec.primary_key} = $1"
		async with pool.acquire() as conn:
			record = await conn.fetchrow(query, entity_id)
		return cls.from_record(record) if record else None

	@classmethod
	async def get_by_ids(cls: type[RowT], pool: asyncpg.Pool, ids: Sequence[Any]) -> list[RowT]:
		"""Batch load; result order is whatever storage returns."""
		unique_ids = list(dict.fromkeys(ids))
		if not unique_ids:
			return []
		query = f"{cls.spec.select} WHERE {cls.spec.primary_key} = ANY($1)"
		async with pool.acquire() as conn:
			records = await conn.fetch(query, unique_ids)
		return [cls.from_record(record) for record in records]

	@classmethod
	async def fetch_where(cls: type[RowT], pool: asyncpg.Pool, builder: QueryBuilder) -> list[RowT]:
		query, params = builder.build()
		async with pool.acquire() as conn:
			records = await conn.fetch(query, *params)
		return [cls.from_record(record) for record in records]

	@classmethod
	async def count_where(cls, pool: asyncpg.Pool, builder: QueryBuilder) -> int:
		query, params = builder.build_count()
		async with pool.acquire() as conn:
			total = await conn.fetchval(query, *params)
		return int(total or 0)


class View(BaseModel):
	"""One fetch-level projection of an entity."""

	model_config = ConfigDict(populate_by_name=True)

	@classmethod
	async def from_table(cls, pool: asyncpg.Pool, row: Any, expansion: Expansion) -> "View":
		raise NotImplementedError


class EntityFacade(Generic[RowT]):
	"""Single entry point per entity, dispatching on fetch level.

	``views`` must map every ``FetchLevel`` to exactly one view class; the
	caller never sees which one was picked, only its serialized fields.
	"""

	entity: ClassVar[str]
	table: ClassVar[type[TableRow]]
	views: ClassVar[Mapping[FetchLevel, type[View]]]

	def __init_subclass__(cls, **kwargs: Any) -> None:
		super().__init_subclass__(**kwargs)
		views = getattr(cls, "views", None)
		if views is not None and set(views) != set(FetchLevel):
			missing = sorted(level.value for level in set(FetchLevel) - set(views))
			raise TypeError(f"{cls.__name__} does not map fetch levels: {missing}")

	def expansion(
		self,
		fetch_level: Optional[FetchLevel] = None,
		descendant_fetch_level: Optional[FetchLevel] = None,
	) -> Expansion:
		return Expansion.root(fetch_level, descendant_fetch_level, depth=settings.max_fetch_depth)

	async def from_table(self, pool: asyncpg.Pool, row: RowT, expansion: Expansion) -> View:
		level = expansion.effective_level
		view_cls = self.views.get(level)
		if view_cls is None:  # pragma: no cover - guarded by __init_subclass__
			raise InternalServerError(f"no {self.entity} view for fetch level {level.value}")
		obs_metrics.inc_entity_fetch(self.entity, level.value)
		return await view_cls.from_table(pool, row, expansion)

	async def from_tables(self, pool: asyncpg.Pool, rows: Sequence[RowT], expansion: Expansion) -> list[View]:
		return [await self.from_table(pool, row, expansion) for row in rows]

	async def get_row(self, pool: asyncpg.Pool, entity_id: Any) -> RowT:
		row = await self.table.get_by_id(pool, entity_id)
		if row is None:
			raise NotFoundError(f"{self.entity} with id {entity_id} not found")
		return row  # type: ignore[return-value]

	async def get_by_id(
		self,
		pool: asyncpg.Pool,
		entity_id: Any,
		fetch_level: Optional[FetchLevel] = None,
		descendant_fetch_level: Optional[FetchLevel] = None,
		*,
		expansion: Optional[Expansion] = None,
	) -> View:
		row = await self.get_row(pool, entity_id)
		plan = expansion or self.expansion(fetch_level, descendant_fetch_level)
		return await self.from_table(pool, row, plan)

	async def get_from_ids(self, pool: asyncpg.Pool, ids: Sequence[Any], expansion: Expansion) -> list[View]:
		"""One view per id that resolves, in input order; unknown ids are dropped."""
		rows = await self.table.get_by_ids(pool, ids)
		by_key = {row.key: row for row in rows}
		ordered = [by_key[entity_id] for entity_id in ids if entity_id in by_key]
		return await self.from_tables(pool, ordered, expansion)  # type: ignore[arg-type]

	def builder(self, envelope: RequestEnvelope[Any, Any, Any], **kwargs: Any) -> QueryBuilder:
		return from_envelope(
			self.table.spec,
			envelope,
			default_size=settings.default_page_size,
			max_size=settings.max_page_size,
			**kwargs,
		)

	async def query(
		self,
		pool: asyncpg.Pool,
		envelope: RequestEnvelope[Any, Any, Any],
		**kwargs: Any,
	) -> tuple[list[View], int]:
		"""Run the envelope's filter/sort/page and return the page plus the total match count."""
		builder = self.builder(envelope, **kwargs)
		rows = await self.table.fetch_where(pool, builder)
		total = await self.table.count_where(pool, builder)
		plan = self.expansion(envelope.fetch_level, envelope.descendant_fetch_level)
		views = await self.from_tables(pool, rows, plan)  # type: ignore[arg-type]
		return views, total
