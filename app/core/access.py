"""
Allow/deny decisions per (action, resource).

Actions are ``list``, ``get``, ``post``, ``patch`` and ``delete``. Resources
are ``product``, ``user`` (end users) and ``client``.
"""
import logging
from typing import Any, Callable

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.rbac import get_user_role_names
from app.models.rbac import ADMIN, CLIENT
from app.models.user import User

logger = logging.getLogger(__name__)

Policy = Callable[[str, Any, User, set[str]], bool]


def _product_policy(action: str, subject: Any, user: User, roles: set[str]) -> bool:
    if action in ("list", "get"):
        return True
    return ADMIN in roles


def _user_policy(action: str, subject: Any, user: User, roles: set[str]) -> bool:
    if ADMIN in roles:
        return True
    if CLIENT not in roles:
        return False
    if action in ("list", "post"):
        return True
    # get / patch / delete: only the client's own end users
    return subject is not None and subject.client_id == user.id


def _client_policy(action: str, subject: Any, user: User, roles: set[str]) -> bool:
    if ADMIN in roles:
        return True
    return action in ("get", "patch") and subject is not None and subject.id == user.id


POLICIES: dict[str, Policy] = {
    "product": _product_policy,
    "user": _user_policy,
    "client": _client_policy,
}


def is_granted(db: Session, user: User, action: str, resource: str, subject: Any = None) -> bool:
    policy = POLICIES.get(resource)
    if policy is None:
        raise ValueError(f"No access policy for resource {resource!r}")
    return policy(action, subject, user, get_user_role_names(db, user))


def deny_access_unless_granted(
    db: Session, user: User, action: str, resource: str, subject: Any = None
) -> None:
    if not is_granted(db, user, action, resource, subject):
        logger.info("Denied %s on %s for %s", action, resource, user.email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Forbidden. Not allowed to {action} {resource}",
        )
