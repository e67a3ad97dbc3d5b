# app/api/routes/products.py
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from app.api.deps import get_product_service
from app.api.forms import decode_create_product_form
from app.api.schemas.product import ErrorResponse, ProductOut
from app.core.errors import FAILED_TO_ENCODE_PRODUCT, ApiError, InvalidProductID, error_response
from app.models.search import SearchParams, parse_int64
from app.services.catalog import (
    FAILED_TO_CREATE_PRODUCT,
    FAILED_TO_RETRIEVE_PRODUCT,
    FAILED_TO_SEARCH_PRODUCTS,
    ProductService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


def _service_failure(operation: str, default_code: str, exc: Exception) -> ApiError:
    """Collaborator errors are opaque: always 500, with the collaborator's code when it has one."""
    logger.error("Failed to %s", operation.replace("_", " "), extra={"operation": operation, "error": str(exc)})
    code = getattr(exc, "code", None) or default_code
    return ApiError(code, str(exc), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _encode(status_code: int, content: Any, operation: str) -> JSONResponse:
    """
    Render the success body. If that fails the client gets a 500 even though
    the operation itself already happened (a created product stays created).
    """
    try:
        return JSONResponse(status_code=status_code, content=content)
    except (TypeError, ValueError) as exc:
        logger.error("Failed to encode response", extra={"operation": operation, "error": str(exc)})
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, FAILED_TO_ENCODE_PRODUCT, str(exc))


def _first_values(request: Request) -> Dict[str, str]:
    # a repeated key keeps its first value
    params = request.query_params
    return {key: params.getlist(key)[0] for key in params.keys()}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductOut, responses=_ERRORS)
async def create_product(request: Request, service: ProductService = Depends(get_product_service)):
    """
    Create a product from a multipart form:
      - `product`: JSON document (name, description, price, category_id, seller_id, stock, is_available, labels)
      - `main_images`, `thumbnail_images`, `extra_images`: image files

    At least one main or thumbnail image is required.
    """
    payload, images = await decode_create_product_form(request)
    product = payload.to_product()

    try:
        product.id = await service.create_product(product, images)
    except Exception as exc:
        raise _service_failure("create_product", FAILED_TO_CREATE_PRODUCT, exc) from exc

    return _encode(status.HTTP_201_CREATED, product.to_dict(), "create_product")


@router.get("/search", response_model=List[ProductOut], responses=_ERRORS)
async def search_products(request: Request, service: ProductService = Depends(get_product_service)):
    """
    Search products. Query params (all optional): query, category_id, min_price,
    max_price, seller_id, available, labels (comma separated), sort_by
    (name, price, created_at), sort_dir (asc, desc), limit (default 10), offset (default 0).

    Malformed or out-of-range filters are ignored rather than rejected.
    """
    params = SearchParams.from_query(_first_values(request))

    try:
        result = await service.search_products(params)
    except Exception as exc:
        raise _service_failure("search_products", FAILED_TO_SEARCH_PRODUCTS, exc) from exc

    return _encode(status.HTTP_200_OK, [p.to_dict() for p in result], "search_products")


@router.get("/{product_id}", response_model=ProductOut, responses=_ERRORS)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    pid = parse_int64(product_id)
    if pid is None:
        raise InvalidProductID()

    try:
        product = await service.get_product(pid)
    except Exception as exc:
        # not-found included: reported as 500 like any other service failure
        raise _service_failure("get_product", FAILED_TO_RETRIEVE_PRODUCT, exc) from exc

    return _encode(status.HTTP_200_OK, product.to_dict(), "get_product")
