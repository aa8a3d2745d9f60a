from typing import Generic, List, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T] = Field(default_factory=list)  # type: ignore[assignment]
    total: int
    limit: int
    offset: int
    has_more: bool


class DeleteResult(BaseModel):
    deleted: bool


def has_more(offset: int, limit: int, total: int) -> bool:
    return offset + limit < total
