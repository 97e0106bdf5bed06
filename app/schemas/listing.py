from typing import Literal

from pydantic import BaseModel

from app.core.config import settings
from app.schemas.pagination import PageRequest


class ListParams(BaseModel):
    """Query parameters shared by every list endpoint"""
    keyword: str | None = None
    order: Literal["asc", "desc"] = "asc"
    limit: int = settings.DEFAULT_PAGE_SIZE
    page: int = 1

    def page_request(self) -> PageRequest:
        return PageRequest(page=self.page, limit=self.limit)
