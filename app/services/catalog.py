from typing import List, Optional, Protocol, Sequence

from app.models.image import ImageSubmission
from app.models.product import Product
from app.models.search import SearchParams

FAILED_TO_CREATE_PRODUCT = "failed-to-create-product"
FAILED_TO_RETRIEVE_PRODUCT = "failed-to-retrieve-product"
FAILED_TO_SEARCH_PRODUCTS = "failed-to-search-products"


class ServiceError(Exception):
    """Catalog service failure. `code` overrides the per-operation error code when set."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class ProductNotFound(ServiceError):
    def __init__(self, product_id: int):
        super().__init__(f"product {product_id} not found", code=FAILED_TO_RETRIEVE_PRODUCT)
        self.product_id = product_id


class ProductService(Protocol):
    """What the HTTP layer needs from the catalog service."""

    async def create_product(self, product: Product, images: Sequence[ImageSubmission]) -> int:
        """Persist `product` (id unset) with its role-tagged images; return the new id."""
        ...

    async def get_product(self, product_id: int) -> Product:
        ...

    async def search_products(self, params: SearchParams) -> List[Product]:
        ...
