"""Service layer for end users owned by a client."""

import logging
import uuid

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.models.user import User
from app.schemas.listing import ListParams
from app.schemas.pagination import PageResult
from app.schemas.user import UserCreate, UserUpdate
from app.services.paginator import paginate

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when an end user does not exist."""


class UserExistsError(Exception):
    """Raised when a username or email is already taken."""


def find_conflicting_user(
    db: Session,
    *,
    username: str | None,
    email: str | None,
    exclude_id: uuid.UUID | None = None,
) -> User | None:
    """Return any account already using ``username`` or ``email``."""
    conditions = []
    if username is not None:
        conditions.append(User.username == username)
    if email is not None:
        conditions.append(User.email == email)
    if not conditions:
        return None

    query = db.query(User).filter(or_(*conditions))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first()


def apply_keyword_and_order(query: Query, params: ListParams) -> Query:
    if params.keyword:
        search_term = f"%{params.keyword.lower()}%"
        query = query.filter(User.username.ilike(search_term) | User.email.ilike(search_term))
    ordering = User.username.desc() if params.order == "desc" else User.username.asc()
    return query.order_by(ordering)


class UserService:
    """Lists, creates, edits and removes end users."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_user_list(self, params: ListParams, owner: User | None) -> PageResult:
        """Page through end users; ``owner=None`` means every client's users."""
        query = self._db.query(User).filter(User.client_id.is_not(None))
        if owner is not None:
            query = query.filter(User.client_id == owner.id)
        query = apply_keyword_and_order(query, params)
        return paginate(query, params.page_request())

    def get_user(self, user_id: uuid.UUID) -> User:
        user = (
            self._db.query(User)
            .filter(User.id == user_id, User.client_id.is_not(None))
            .one_or_none()
        )
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    def add_user(self, data: UserCreate, owner: User) -> User:
        if find_conflicting_user(self._db, username=data.username, email=data.email):
            raise UserExistsError("Username or email already in use")

        user = User(username=data.username, email=data.email, client_id=owner.id)
        self._db.add(user)
        self._db.commit()
        self._db.refresh(user)
        logger.info("User %s created for client %s", user.id, owner.id)
        return user

    def edit_user(self, user: User, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        if find_conflicting_user(
            self._db,
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=user.id,
        ):
            raise UserExistsError("Username or email already in use")

        for field, value in changes.items():
            setattr(user, field, value)
        self._db.commit()
        self._db.refresh(user)
        logger.info("User %s updated (%s)", user.id, ", ".join(sorted(changes)) or "no changes")
        return user

    def delete_user(self, user: User) -> None:
        user_id = user.id
        self._db.delete(user)
        self._db.commit()
        logger.info("User %s deleted", user_id)
