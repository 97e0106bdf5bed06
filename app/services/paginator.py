"""Turns a filtered, ordered SQLAlchemy query into one page of results."""

from sqlalchemy.orm import Query

from app.schemas.pagination import PageRequest, PageResult


class PageOutOfRangeError(Exception):
    """Raised when the requested page lies past the last page."""


def paginate(query: Query, page_request: PageRequest) -> PageResult:
    # Get total count before pagination
    total = query.order_by(None).count()
    total_pages = (total + page_request.limit - 1) // page_request.limit

    # An empty result set still has a (empty) first page
    if page_request.page > max(total_pages, 1):
        raise PageOutOfRangeError(
            f"Page {page_request.page} does not exist (last page is {max(total_pages, 1)})"
        )

    items = query.offset(page_request.offset).limit(page_request.limit).all()

    return PageResult(
        items=items,
        current_page=page_request.page,
        page_size=page_request.limit,
        total_items=total,
        total_pages=total_pages,
    )
