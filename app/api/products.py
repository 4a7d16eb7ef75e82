from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
from typing import Annotated, Optional

from app.api import routing  # noqa: F401  registers the product_id convertor
from app.database import get_db
from app.errors import ProductNotFoundError, ProductValidationError
from app.repositories.product_repository import ProductRepository
from app.schemas.envelope import Envelope
from app.schemas.product import (
    ProductCreate,
    ProductPatch,
    ProductResponse,
    INT64_MAX,
    INT64_MIN,
)

router = APIRouter(prefix="/products", tags=["Products"])

# IDs outside the INTEGER range fail path validation like any other bad ID
ProductId = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)


def _not_found(e: ProductNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _bad_request(e: ProductValidationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get(
    "",
    response_model=Envelope[list[ProductResponse]],
    summary="List all products",
    description="Get every product, ordered by ascending ID."
)
def list_products(repo: ProductRepository = Depends(get_repository)):
    """Get all products."""
    products = repo.get_all()
    return Envelope(
        code=status.HTTP_200_OK,
        data=[ProductResponse.model_validate(p) for p in products]
    )


@router.post(
    "",
    response_model=Envelope[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with name, price, and initial stock."
)
def create_product(
    product_data: ProductCreate,
    repo: ProductRepository = Depends(get_repository)
):
    """
    Create a new product.

    - **name**: Product name (required, non-empty)
    - **price**: Product price, must be positive (required)
    - **stock**: Initial stock quantity, must be non-negative (required)
    """
    product = repo.create(product_data)
    return Envelope(
        code=status.HTTP_201_CREATED,
        data=ProductResponse.model_validate(product)
    )


@router.get(
    "/search",
    response_model=Envelope[list[ProductResponse]],
    summary="Search products by name",
    description="Get products whose name contains the `name` query parameter."
)
def search_products(
    name: Optional[str] = Query(None, description="Substring to look for in product names"),
    repo: ProductRepository = Depends(get_repository)
):
    """An empty result is a valid answer, not an error."""
    if not name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="name is required"
        )

    products = repo.search(name)
    return Envelope(
        code=status.HTTP_200_OK,
        data=[ProductResponse.model_validate(p) for p in products]
    )


@router.post(
    "/bulk",
    response_model=Envelope[list[ProductResponse]],
    status_code=status.HTTP_201_CREATED,
    summary="Create products in bulk",
    description="""
    Create several products at once.

    **All-or-nothing:** every draft is validated before anything is written,
    and the inserts share one transaction. A single invalid draft or a failed
    insert leaves the table untouched.
    """
)
def bulk_create_products(
    drafts: list[ProductCreate],
    repo: ProductRepository = Depends(get_repository)
):
    try:
        products = repo.bulk_create(drafts)
    except ProductValidationError as e:
        raise _bad_request(e)

    return Envelope(
        code=status.HTTP_201_CREATED,
        data=[ProductResponse.model_validate(p) for p in products]
    )


@router.get(
    "/{product_id:product_id}",
    response_model=Envelope[ProductResponse],
    summary="Get product by ID",
    description="Get detailed information about a specific product."
)
def get_product(
    product_id: ProductId,
    repo: ProductRepository = Depends(get_repository)
):
    """Get a product by ID."""
    try:
        product = repo.get_by_id(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Envelope(
        code=status.HTTP_200_OK,
        data=ProductResponse.model_validate(product)
    )


@router.put(
    "/{product_id:product_id}",
    response_model=Envelope[ProductResponse],
    summary="Replace a product",
    description="Replace name, price and stock of a product. All three fields are required."
)
def update_product(
    product_id: ProductId,
    product_data: ProductCreate,
    repo: ProductRepository = Depends(get_repository)
):
    """
    Update a product.

    The ID always comes from the path; an `id` in the body is ignored.
    """
    try:
        product = repo.update(product_id, product_data)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Envelope(
        code=status.HTTP_200_OK,
        data=ProductResponse.model_validate(product)
    )


@router.patch(
    "/{product_id:product_id}",
    response_model=Envelope[ProductResponse],
    summary="Partially update a product",
    description="Update only the fields sent in the body. At least one field is required."
)
def patch_product(
    product_id: ProductId,
    patch: ProductPatch,
    repo: ProductRepository = Depends(get_repository)
):
    """Partial updates: only include fields you want to change."""
    try:
        product = repo.partial_update(product_id, patch)
    except ProductValidationError as e:
        raise _bad_request(e)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Envelope(
        code=status.HTTP_200_OK,
        data=ProductResponse.model_validate(product)
    )


@router.delete(
    "/{product_id:product_id}",
    response_model=Envelope[None],
    summary="Delete a product",
    description="Delete a product by ID. Removal is permanent."
)
def delete_product(
    product_id: ProductId,
    repo: ProductRepository = Depends(get_repository)
):
    """Delete a product."""
    try:
        repo.delete(product_id)
    except ProductNotFoundError as e:
        raise _not_found(e)

    return Envelope(code=status.HTTP_200_OK)
