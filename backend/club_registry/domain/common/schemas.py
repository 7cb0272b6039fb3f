"""Request/response envelopes and shared value types."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from club_registry.domain.common.exceptions import BadRequestError
from club_registry.domain.common.fetch_level import FetchLevel

DataT = TypeVar("DataT")
FilterT = TypeVar("FilterT")
SortT = TypeVar("SortT")


class MultiLangString(BaseModel):
    """Bilingual display text; Thai is always present."""

    th: str
    en: Optional[str] = Field(default=None, alias="en-US")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_columns(cls, th: Optional[str], en: Optional[str]) -> Optional["MultiLangString"]:
        if th is None:
            return None
        return cls(th=th, en=en)


class FlexibleMultiLangString(BaseModel):
    """Bilingual text on write paths, where either language may be omitted."""

    th: Optional[str] = None
    en: Optional[str] = Field(default=None, alias="en-US")

    model_config = ConfigDict(populate_by_name=True)


class PaginationConfig(BaseModel):
    p: int = Field(default=1, ge=1)
    size: Optional[int] = Field(default=None, ge=1)


class FilterConfig(BaseModel, Generic[FilterT]):
    data: Optional[FilterT] = None
    q: Optional[str] = None


class SortingConfig(BaseModel, Generic[SortT]):
    by: Optional[list[SortT]] = None
    ascending: bool = True

    @field_validator("by", mode="before")
    @classmethod
    def _single_key(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class RequestEnvelope(BaseModel, Generic[DataT, FilterT, SortT]):
    """Everything a caller may send alongside a request.

    GET routes decode it from the query string, writes from the JSON body.
    """

    data: Optional[DataT] = None
    pagination: Optional[PaginationConfig] = None
    filter: Optional[FilterConfig[FilterT]] = None
    sorting: Optional[SortingConfig[SortT]] = None
    fetch_level: Optional[FetchLevel] = None
    descendant_fetch_level: Optional[FetchLevel] = None

    def require_data(self) -> DataT:
        if self.data is None:
            raise BadRequestError("request body is empty")
        return self.data


class ErrorObject(BaseModel):
    id: str
    code: int
    error_type: str
    detail: str
    source: str


class PaginationMeta(BaseModel):
    first: str
    last: str
    next: Optional[str] = None
    prev: Optional[str] = None
    size: int
    total: int


class Metadata(BaseModel):
    timestamp: datetime
    pagination: Optional[PaginationMeta] = None


class ResponseEnvelope(BaseModel):
    """Uniform response body; ``data`` and ``error`` are never both set."""

    api_version: str
    data: Any = None
    error: Optional[ErrorObject] = None
    meta: Optional[Metadata] = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
