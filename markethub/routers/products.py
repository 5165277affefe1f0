# markethub/routers/products.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from markethub.database import get_session
from markethub.repositories.product_repo import ProductRepository
from markethub.schemas.product import ProductRead
from markethub.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=list[ProductRead])
def list_products(
    session: Session = Depends(get_session),
    skip: int = 0,
    limit: int = 50,
):
    """
    Public catalog listing (active products only).
    """
    return service.list_products(session, skip=skip, limit=limit)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Public product detail, whatever its status.

    The storefront reads this when adding to cart to validate
    price, stock and status at that moment.
    """
    return service.get_product(session, product_id)
