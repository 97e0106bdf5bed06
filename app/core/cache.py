from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.config import settings


def compute_etag(body: bytes) -> str:
    # Quote it to behave like a real ETag
    return f'"{hashlib.sha256(body).hexdigest()}"'


def etag_matches(if_none_match: str | None, etag: str) -> bool:
    """
    Supports:
      If-None-Match: "abc"
      If-None-Match: W/"abc", "def"
      If-None-Match: *
    """
    if not if_none_match:
        return False
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False


def http_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def cached_response(
    request: Request,
    payload: Any = None,
    *,
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
    last_modified: datetime | None = None,
    public: bool = False,
) -> Response:
    """
    Serialize ``payload`` to JSON and attach HTTP caching headers.

    GET responses are cacheable for CACHE_MAX_AGE seconds and answer a
    matching If-None-Match with 304. Writes are marked no-store.
    """
    extra = dict(headers or {})

    if status_code == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status_code, headers={**extra, "Cache-Control": "no-store"})

    response = JSONResponse(content=jsonable_encoder(payload), status_code=status_code, headers=extra)
    etag = compute_etag(response.body)
    response.headers["ETag"] = etag
    if last_modified is not None:
        response.headers["Last-Modified"] = http_date(last_modified)

    if request.method != "GET":
        response.headers["Cache-Control"] = "no-store"
        return response

    cache_control = f"{'public' if public else 'private'}, max-age={settings.CACHE_MAX_AGE}"
    response.headers["Cache-Control"] = cache_control

    if etag_matches(request.headers.get("if-none-match"), etag):
        not_modified = {"ETag": etag, "Cache-Control": cache_control}
        if last_modified is not None:
            not_modified["Last-Modified"] = http_date(last_modified)
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=not_modified)

    return response
