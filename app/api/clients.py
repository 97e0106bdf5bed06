import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_link_builder, get_list_params
from app.core.access import deny_access_unless_granted
from app.core.cache import cached_response
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.client import ClientCreate, ClientOut, ClientUpdate
from app.schemas.listing import ListParams
from app.schemas.pagination import LinkBuilder, PagedListResponse
from app.services.client_service import ClientService

router = APIRouter(prefix="/clients", tags=["clients"])


def client_to_out(c: User) -> ClientOut:
    return ClientOut(
        id=str(c.id),
        username=c.username,
        email=c.email,
        is_active=c.is_active,
        users_count=len(c.users),
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


@router.get("", name="client_list", response_model=PagedListResponse[ClientOut])
def list_clients(
    request: Request,
    params: ListParams = Depends(get_list_params),
    link_builder: LinkBuilder = Depends(get_link_builder),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deny_access_unless_granted(db, current_user, "list", "client")

    page = ClientService(db).get_client_list(params).map(client_to_out)
    body = PagedListResponse[ClientOut].build(page, link_builder, "client_list")
    return cached_response(request, body.model_dump(mode="json", by_alias=True))


@router.get("/{client_id}", name="client_details", response_model=ClientOut)
def get_client(
    client_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = ClientService(db).get_client(client_id)
    deny_access_unless_granted(db, current_user, "get", "client", client)
    return cached_response(request, client_to_out(client), last_modified=client.updated_at)


@router.post("", name="client_post", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClientCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deny_access_unless_granted(db, current_user, "post", "client")

    client = ClientService(db).add_client(payload)
    return cached_response(
        request,
        client_to_out(client),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": request.app.url_path_for("client_details", client_id=str(client.id))},
    )


@router.patch("/{client_id}", name="client_patch", response_model=ClientOut)
def update_client(
    client_id: uuid.UUID,
    payload: ClientUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ClientService(db)
    client = service.get_client(client_id)
    deny_access_unless_granted(db, current_user, "patch", "client", client)

    client = service.edit_client(client, payload)
    return cached_response(request, client_to_out(client), last_modified=client.updated_at)


@router.delete("/{client_id}", name="client_delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ClientService(db)
    client = service.get_client(client_id)
    deny_access_unless_granted(db, current_user, "delete", "client", client)

    service.delete_client(client)
    return cached_response(request, status_code=status.HTTP_204_NO_CONTENT)
