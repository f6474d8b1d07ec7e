from typing import List

from fastapi import APIRouter, Depends

from cloud_kitchen.core.errors import NotFoundError
from cloud_kitchen.domain.schemas import ProductResponse
from cloud_kitchen.interfaces.deps import get_product_repo

router = APIRouter()


@router.get("", response_model=List[ProductResponse])
def list_products(repo=Depends(get_product_repo)):
    return repo.list_products()


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, repo=Depends(get_product_repo)):
    product = repo.get_product(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product
