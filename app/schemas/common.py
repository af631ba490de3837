from typing import Any
from pydantic import BaseModel


class Page(BaseModel):
    docs: list[Any]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: int | None = None
    next_page: int | None = None
