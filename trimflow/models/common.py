from math import ceil
from typing import Generic, List, TypeVar
from uuid import uuid4

from pydantic import BaseModel

T = TypeVar("T")


def new_id() -> str:
    return uuid4().hex


class Page(BaseModel, Generic[T]):
    """Envelope paginado (páginas começam em 0)."""

    content: List[T]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def build(cls, content: List[T], page: int, size: int, total: int) -> "Page[T]":
        total_pages = ceil(total / size) if size else 0
        return cls(
            content=content,
            page_number=page,
            page_size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
        )
