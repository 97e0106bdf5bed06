import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_link_builder, get_list_params
from app.core.access import deny_access_unless_granted
from app.core.cache import cached_response
from app.core.rbac import get_user_role_names
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.rbac import ADMIN
from app.models.user import User
from app.schemas.listing import ListParams
from app.schemas.pagination import LinkBuilder, PagedListResponse
from app.schemas.user import UserCreate, UserOut, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def user_to_out(u: User) -> UserOut:
    return UserOut(
        id=str(u.id),
        username=u.username,
        email=u.email,
        client_id=str(u.client_id) if u.client_id else None,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


def _load_user(db: Session, current_user: User, action: str, user_id: uuid.UUID) -> User:
    user = UserService(db).get_user(user_id)
    deny_access_unless_granted(db, current_user, action, "user", user)
    return user


@router.get("", name="user_list", response_model=PagedListResponse[UserOut])
def list_users(
    request: Request,
    params: ListParams = Depends(get_list_params),
    link_builder: LinkBuilder = Depends(get_link_builder),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List end users. Clients only see the users they own; admins see all.
    """
    deny_access_unless_granted(db, current_user, "list", "user")

    owner = None if ADMIN in get_user_role_names(db, current_user) else current_user
    page = UserService(db).get_user_list(params, owner).map(user_to_out)

    body = PagedListResponse[UserOut].build(page, link_builder, "user_list")
    return cached_response(request, body.model_dump(mode="json", by_alias=True))


@router.get("/{user_id}", name="user_details", response_model=UserOut)
def get_user(
    user_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _load_user(db, current_user, "get", user_id)
    return cached_response(request, user_to_out(user), last_modified=user.updated_at)


@router.post("", name="user_post", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deny_access_unless_granted(db, current_user, "post", "user")

    user = UserService(db).add_user(payload, owner=current_user)
    return cached_response(
        request,
        user_to_out(user),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": request.app.url_path_for("user_details", user_id=str(user.id))},
    )


@router.patch("/{user_id}", name="user_patch", response_model=UserOut)
def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _load_user(db, current_user, "patch", user_id)
    user = UserService(db).edit_user(user, payload)
    return cached_response(request, user_to_out(user), last_modified=user.updated_at)


@router.delete("/{user_id}", name="user_delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = _load_user(db, current_user, "delete", user_id)
    UserService(db).delete_user(user)
    return cached_response(request, status_code=status.HTTP_204_NO_CONTENT)
