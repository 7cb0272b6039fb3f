"""Parameterized SELECT construction for filtered, sorted, paginated reads.

Every predicate is appended together with the value it binds, so the n-th
placeholder in the statement always refers to the n-th parameter. Sort keys
only ever come from a closed enum mapped to known column expressions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel

from club_registry.domain.common.schemas import PaginationConfig, RequestEnvelope, SortingConfig

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class TableSpec:
	"""Static description of how one entity is read from storage."""

	columns: str
	source: str
	primary_key: str
	sort_columns: Mapping[Enum, str]
	filter_columns: Mapping[str, str]
	search_columns: tuple[str, ...] = ()

	@property
	def select(self) -> str:
		return f"SELECT {self.columns} FROM {self.source}"


def escape_like(text: str) -> str:
	return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _db_value(value: Any) -> Any:
	if isinstance(value, Enum):
		return value.value
	return value


@dataclass
class QueryBuilder:
	spec: TableSpec
	_predicates: list[str] = field(default_factory=list)
	_params: list[Any] = field(default_factory=list)
	_order: list[str] = field(default_factory=list)
	_limit: Optional[tuple[int, int]] = None

	def bind(self, value: Any) -> str:
		"""Append a parameter and return its placeholder."""
		self._params.append(_db_value(value))
		return f"${len(self._params)}"

	def where(self, template: str, *values: Any) -> "QueryBuilder":
		"""Add a predicate; each ``{}`` in ``template`` receives a fresh placeholder."""
		placeholders = [self.bind(value) for value in values]
		self._predicates.append(template.format(*placeholders))
		return self

	def where_equals(self, column: str, value: Any) -> "QueryBuilder":
		if value is None:
			return self
		return self.where(f"{column} = {{}}", value)

	def filter_by(self, filter_data: Optional[BaseModel]) -> "QueryBuilder":
		if filter_data is None:
			return self
		for name in type(filter_data).model_fields:
			value = getattr(filter_data, name)
			if value is None:
				continue
			column = self.spec.filter_columns.get(name)
			if column is None:
				continue
			self.where_equals(column, value)
		return self

	def search(self, text: Optional[str]) -> "QueryBuilder":
		if text is None or not text.strip() or not self.spec.search_columns:
			return self
		pattern = f"%{escape_like(text.strip())}%"
		clauses = [f"{column} ILIKE {{}}" for column in self.spec.search_columns]
		return self.where("(" + " OR ".join(clauses) + ")", *([pattern] * len(clauses)))

	def order_by(self, fields: Optional[Sequence[Enum]], ascending: bool = True) -> "QueryBuilder":
		direction = "ASC" if ascending else "DESC"
		columns: list[str] = []
		for sort_field in fields or ():
			column = self.spec.sort_columns[sort_field]
			if column not in columns:
				columns.append(column)
		# primary key last so equal sort values still page deterministically
		if self.spec.primary_key not in columns:
			columns.append(self.spec.primary_key)
		self._order = [f"{column} {direction}" for column in columns]
		return self

	def paginate(self, page: int = DEFAULT_PAGE, size: int = DEFAULT_PAGE_SIZE) -> "QueryBuilder":
		self._limit = (size, (page - 1) * size)
		return self

	def _where_clause(self) -> str:
		if not self._predicates:
			return ""
		return " WHERE " + " AND ".join(self._predicates)

	def build(self) -> tuple[str, list[Any]]:
		if not self._order:
			self.order_by(None)
		if self._limit is None:
			self.paginate()
		params = list(self._params)
		size, offset = self._limit  # type: ignore[misc]
		limit_idx = len(params) + 1
		params.extend([size, offset])
		query = (
			f"{self.spec.select}{self._where_clause()}"
			f" ORDER BY {', '.join(self._order)}"
			f" LIMIT ${limit_idx} OFFSET ${limit_idx + 1}"
		)
		return query, params

	def build_count(self) -> tuple[str, list[Any]]:
		query = f"SELECT COUNT(*) FROM {self.spec.source}{self._where_clause()}"
		return query, list(self._params)

	@property
	def predicate_count(self) -> int:
		return len(self._predicates)


def resolve_page(
	pagination: Optional[PaginationConfig],
	*,
	default_size: int = DEFAULT_PAGE_SIZE,
	max_size: Optional[int] = None,
) -> tuple[int, int]:
	page = pagination.p if pagination else DEFAULT_PAGE
	size = (pagination.size if pagination and pagination.size else None) or default_size
	if max_size is not None:
		size = min(size, max_size)
	return page, size


def from_envelope(
	spec: TableSpec,
	envelope: RequestEnvelope[Any, Any, Any],
	*,
	default_size: int = DEFAULT_PAGE_SIZE,
	max_size: Optional[int] = None,
	extra_predicates: Iterable[tuple[str, Any]] = (),
) -> QueryBuilder:
	"""Translate a request envelope's filter, sorting and pagination."""
	builder = QueryBuilder(spec)
	filter_config = envelope.filter
	if filter_config is not None:
		builder.filter_by(filter_config.data)
	for column, value in extra_predicates:
		builder.where_equals(column, value)
	if filter_config is not None:
		builder.search(filter_config.q)
	sorting: Optional[SortingConfig[Any]] = envelope.sorting
	builder.order_by(sorting.by if sorting else None, sorting.ascending if sorting else True)
	page, size = resolve_page(envelope.pagination, default_size=default_size, max_size=max_size)
	builder.paginate(page, size)
	return builder


def build_update(
	table: str,
	assignments: Mapping[str, Any],
	*,
	key_column: str,
	key: Any,
) -> Optional[tuple[str, list[Any]]]:
	"""``UPDATE`` over the supplied columns only; ``None`` when nothing was supplied."""
	if not assignments:
		return None
	params: list[Any] = []
	fragments: list[str] = []
	for column, value in assignments.items():
		params.append(_db_value(value))
		fragments.append(f"{column} = ${len(params)}")
	params.append(key)
	query = f"UPDATE {table} SET {', '.join(fragments)} WHERE {key_column} = ${len(params)}"
	return query, params
