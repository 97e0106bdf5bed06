from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from app.core.config import settings

T = TypeVar("T")

LinkBuilder = Callable[[str, int], str]


class DuplicateMetaKey(AssertionError):
    """Raised when a meta key is assigned twice while building a page."""


class PageRequest(BaseModel):
    """Which page the caller asked for"""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PageResult(BaseModel, Generic[T]):
    """One page of rows plus the counts the data source computed for it."""
    model_config = ConfigDict(frozen=True)

    items: list[T]
    current_page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_items: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "PageResult":
        if len(self.items) > self.page_size:
            raise ValueError(f"{len(self.items)} items do not fit a page of {self.page_size}")
        expected_pages = (self.total_items + self.page_size - 1) // self.page_size
        if self.total_pages != expected_pages:
            raise ValueError(
                f"total_pages is {self.total_pages}, expected {expected_pages} "
                f"for {self.total_items} items at {self.page_size} per page"
            )
        return self

    def map(self, fn: Callable[[Any], Any]) -> "PageResult":
        """Return the same page with every item passed through ``fn``."""
        return self.model_copy(update={"items": [fn(item) for item in self.items]})


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    href: str


class PageLinks(BaseModel):
    """Navigation links; absent neighbours are left out of the payload."""
    model_config = ConfigDict(frozen=True)

    previous_page: Link | None = None
    current_page: Link
    next_page: Link | None = None

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler):
        return {name: link for name, link in handler(self).items() if link is not None}


class PageMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int
    current_items: int
    total_items: int
    total_pages: int


def add_meta(meta: dict[str, int], name: str, value: int) -> None:
    if name in meta:
        raise DuplicateMetaKey(f"Meta '{name}' is already set and cannot be overridden")
    meta[name] = value


class PagedListResponse(BaseModel, Generic[T]):
    """
    Paginated list payload with hypermedia navigation.

    Serialize with ``by_alias=True`` so ``links`` is emitted as ``_links``.
    """
    model_config = ConfigDict(frozen=True)

    data: tuple[T, ...]
    links: PageLinks = Field(serialization_alias="_links")
    meta: PageMeta

    @classmethod
    def build(
        cls,
        page_result: PageResult,
        link_builder: LinkBuilder,
        route_name: str,
    ) -> "PagedListResponse[T]":
        data = tuple(page_result.items)

        meta: dict[str, int] = {}
        add_meta(meta, "limit", page_result.page_size)
        add_meta(meta, "current_items", len(data))
        add_meta(meta, "total_items", page_result.total_items)
        add_meta(meta, "total_pages", page_result.total_pages)

        current = page_result.current_page
        links: dict[str, Link] = {}
        if current > 1 and page_result.total_pages > 0:
            links["previous_page"] = Link(href=link_builder(route_name, current - 1))
        links["current_page"] = Link(href=link_builder(route_name, current))
        if current < page_result.total_pages:
            links["next_page"] = Link(href=link_builder(route_name, current + 1))

        return cls(data=data, links=PageLinks(**links), meta=PageMeta(**meta))
