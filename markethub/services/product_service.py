# markethub/services/product_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from markethub.models.product import Product
from markethub.repositories.product_repo import ProductRepository


class ProductService:
    """
    Read-side catalog logic.

    The cart and the storefront catalog client only ever read products;
    catalog management lives in the admin tooling.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Product]:
        return self.repo.list_products(session, skip=skip, limit=limit, only_active=True)

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product
