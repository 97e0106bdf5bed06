import uuid

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_link_builder, get_list_params
from app.core.access import deny_access_unless_granted
from app.core.cache import cached_response
from app.core.security import get_current_user
from app.db.session import get_db
from app.models.product import Product
from app.models.user import User
from app.schemas.listing import ListParams
from app.schemas.pagination import LinkBuilder, PagedListResponse
from app.schemas.product import ProductCreate, ProductDetailOut, ProductOut, ProductUpdate
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def product_to_out(p: Product) -> ProductOut:
    return ProductOut(id=str(p.id), name=p.name, brand=p.brand)


def product_to_detail(p: Product) -> ProductDetailOut:
    return ProductDetailOut(
        id=str(p.id),
        name=p.name,
        brand=p.brand,
        details=p.details,
        release_date=p.release_date,
        created_at=p.created_at,
        updated_at=p.updated_at,
    )


@router.get("", name="product_list", response_model=PagedListResponse[ProductOut])
def list_products(
    request: Request,
    params: ListParams = Depends(get_list_params),
    link_builder: LinkBuilder = Depends(get_link_builder),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    List the product catalog, searchable by name or brand.
    """
    deny_access_unless_granted(db, current_user, "list", "product")

    page = ProductService(db).get_product_list(params).map(product_to_out)
    body = PagedListResponse[ProductOut].build(page, link_builder, "product_list")
    return cached_response(request, body.model_dump(mode="json", by_alias=True), public=True)


@router.get("/{product_id}", name="product_details", response_model=ProductDetailOut)
def get_product(
    product_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = ProductService(db).get_product(product_id)
    deny_access_unless_granted(db, current_user, "get", "product", product)
    return cached_response(
        request, product_to_detail(product), last_modified=product.updated_at, public=True
    )


@router.post("", name="product_post", response_model=ProductDetailOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    deny_access_unless_granted(db, current_user, "post", "product")

    product = ProductService(db).add_product(payload)
    return cached_response(
        request,
        product_to_detail(product),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": request.app.url_path_for("product_details", product_id=str(product.id))},
    )


@router.patch("/{product_id}", name="product_patch", response_model=ProductDetailOut)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ProductService(db)
    product = service.get_product(product_id)
    deny_access_unless_granted(db, current_user, "patch", "product", product)

    product = service.edit_product(product, payload)
    return cached_response(request, product_to_detail(product), last_modified=product.updated_at)


@router.delete("/{product_id}", name="product_delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    service = ProductService(db)
    product = service.get_product(product_id)
    deny_access_unless_granted(db, current_user, "delete", "product", product)

    service.delete_product(product)
    return cached_response(request, status_code=status.HTTP_204_NO_CONTENT)
