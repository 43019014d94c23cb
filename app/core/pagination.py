"""
Page-number pagination shared by list endpoints.
"""
import math
from pydantic import BaseModel, Field


class PageParams(BaseModel):
    page_size: int = Field(10, ge=1, le=100)
    page_number: int = Field(1, ge=1)

    @property
    def skip(self) -> int:
        return (self.page_number - 1) * self.page_size


class Pagination(BaseModel):
    total_count: int
    page_size: int
    page_number: int
    total_pages: int
    skip: int
    limit: int

    @classmethod
    def build(cls, params: PageParams, total_count: int) -> "Pagination":
        return cls(
            total_count=total_count,
            page_size=params.page_size,
            page_number=params.page_number,
            total_pages=math.ceil(total_count / params.page_size),
            skip=params.skip,
            limit=params.page_size,
        )
