"""Service layer for the product catalog."""

import logging
import uuid

from sqlalchemy.orm import Session

from app.models.product import Product
from app.schemas.listing import ListParams
from app.schemas.pagination import PageResult
from app.schemas.product import ProductCreate, ProductUpdate
from app.services.paginator import paginate

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Raised when a product does not exist."""


class ProductService:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get_product_list(self, params: ListParams) -> PageResult:
        query = self._db.query(Product)

        if params.keyword:
            search_term = f"%{params.keyword.lower()}%"
            query = query.filter(Product.name.ilike(search_term) | Product.brand.ilike(search_term))

        ordering = Product.name.desc() if params.order == "desc" else Product.name.asc()
        # id as tie-breaker keeps pages stable when names repeat
        query = query.order_by(ordering, Product.id.asc())
        return paginate(query, params.page_request())

    def get_product(self, product_id: uuid.UUID) -> Product:
        product = self._db.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    def add_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        self._db.add(product)
        self._db.commit()
        self._db.refresh(product)
        logger.info("Product %s created", product.id)
        return product

    def edit_product(self, product: Product, data: ProductUpdate) -> Product:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        self._db.commit()
        self._db.refresh(product)
        logger.info("Product %s updated", product.id)
        return product

    def delete_product(self, product: Product) -> None:
        product_id = product.id
        self._db.delete(product)
        self._db.commit()
        logger.info("Product %s deleted", product_id)
