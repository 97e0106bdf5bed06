from typing import Literal

from fastapi import Query, Request

from app.core.config import settings
from app.schemas.listing import ListParams
from app.schemas.pagination import LinkBuilder


def get_list_params(
    keyword: str | None = Query(default=None, pattern=r"^[a-zA-Z0-9]+$", description="The keyword to search for"),
    order: Literal["asc", "desc"] = Query(default="asc", description="Sort order (asc or desc)"),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Max items per page"),
    page: int = Query(default=1, ge=1, description="The page number"),
) -> ListParams:
    return ListParams(keyword=keyword, order=order, limit=limit, page=page)


def get_link_builder(request: Request) -> LinkBuilder:
    """
    Absolute URLs for a named route, keeping the current query string
    (keyword, order, limit) and swapping in the page number.
    """
    params = dict(request.query_params)

    def build(route_name: str, page: int) -> str:
        url = request.url_for(route_name)
        return str(url.include_query_params(**{**params, "page": page}))

    return build
