from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.product_service import (
    ProductService,
    ProductNotFoundError,
    ProductIdMismatchError
)
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse
)

router = APIRouter(prefix="/products", tags=["Products"])


def _not_found(e: ProductNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "",
    response_model=list[ProductResponse],
    summary="List all products",
    description="Get every product, ordered by id."
)
def list_products(db: Session = Depends(get_db)):
    """Get all products."""
    service = ProductService(db)
    return service.list()


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get a single product."
)
def get_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Get a product by ID."""
    service = ProductService(db)

    try:
        return service.get(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a product; the server assigns its id."
)
def create_product(
    product_data: ProductCreate,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**: Product name (required)
    - **price**: Product price (required)

    The `Location` header points at the new resource.
    """
    service = ProductService(db)
    product = service.create(product_data)
    response.headers["Location"] = str(
        request.url_for("get_product", product_id=product.id)
    )
    return product


@router.put(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a product",
    description="Replace a product. The payload id must match the path id."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    Returns 400 when the ids differ and 404 when the product is missing.
    """
    service = ProductService(db)

    try:
        service.update(product_id, product_data)
    except ProductIdMismatchError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID."
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)

    try:
        service.delete(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
