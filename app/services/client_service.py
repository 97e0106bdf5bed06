"""Service layer for clients, the API customers that own end users."""

import logging
import uuid

from sqlalchemy.orm import Session

from app.models.rbac import CLIENT, Role, UserRole
from app.models.user import User
from app.schemas.client import ClientCreate, ClientUpdate
from app.schemas.listing import ListParams
from app.schemas.pagination import PageResult
from app.services.paginator import paginate
from app.services.user_service import apply_keyword_and_order, find_conflicting_user

logger = logging.getLogger(__name__)


class ClientNotFoundError(Exception):
    """Raised when a client does not exist."""


class ClientExistsError(Exception):
    """Raised when a client's username or email is already taken."""


def ensure_role(db: Session, name: str) -> Role:
    role = db.query(Role).filter(Role.name == name).one_or_none()
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.flush()
    return role


class ClientService:
    def __init__(self, db: Session) -> None:
        self._db = db

    def _clients(self):
        return (
            self._db.query(User)
            .join(UserRole, UserRole.user_id == User.id)
            .join(Role, Role.id == UserRole.role_id)
            .filter(Role.name == CLIENT, User.client_id.is_(None))
        )

    def get_client_list(self, params: ListParams) -> PageResult:
        query = apply_keyword_and_order(self._clients(), params)
        return paginate(query, params.page_request())

    def get_client(self, client_id: uuid.UUID) -> User:
        client = self._clients().filter(User.id == client_id).one_or_none()
        if client is None:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return client

    def add_client(self, data: ClientCreate) -> User:
        if find_conflicting_user(self._db, username=data.username, email=data.email):
            raise ClientExistsError("Username or email already in use")

        client = User(username=data.username, email=data.email)
        self._db.add(client)
        self._db.flush()
        self._db.add(UserRole(user_id=client.id, role_id=ensure_role(self._db, CLIENT).id))
        self._db.commit()
        self._db.refresh(client)
        logger.info("Client %s created", client.id)
        return client

    def edit_client(self, client: User, data: ClientUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        if find_conflicting_user(
            self._db,
            username=changes.get("username"),
            email=changes.get("email"),
            exclude_id=client.id,
        ):
            raise ClientExistsError("Username or email already in use")

        for field, value in changes.items():
            setattr(client, field, value)
        self._db.commit()
        self._db.refresh(client)
        logger.info("Client %s updated", client.id)
        return client

    def delete_client(self, client: User) -> None:
        # End users go with their client (delete-orphan cascade)
        client_id, owned = client.id, len(client.users)
        self._db.delete(client)
        self._db.commit()
        logger.info("Client %s deleted along with %d user(s)", client_id, owned)
