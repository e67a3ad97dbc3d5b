"""
File-backed catalog service: products live in the `products` table of a
FileBackedDB, images on disk under the configured image directory.
"""
import json
import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import List, Sequence

from fastapi.concurrency import run_in_threadpool

from app.database import FileBackedDB
from app.models.image import ImageSubmission
from app.models.product import Product, ProductImage
from app.models.search import SearchParams
from app.services.catalog import (
    FAILED_TO_CREATE_PRODUCT,
    FAILED_TO_SEARCH_PRODUCTS,
    ProductNotFound,
    ServiceError,
)
from app.utils.images import delete_product_images, image_url, save_image_submission

logger = logging.getLogger(__name__)

SORT_FIELDS = ("name", "price", "created_at")
EPOCH_MIN = datetime.min.replace(tzinfo=timezone.utc)


def matches(product: Product, params: SearchParams) -> bool:
    if params.query:
        needle = params.query.lower()
        if needle not in product.name.lower() and needle not in product.description.lower():
            return False
    if params.category_id is not None and product.category_id != params.category_id:
        return False
    if params.min_price is not None and product.price < params.min_price:
        return False
    if params.max_price is not None and product.price > params.max_price:
        return False
    if params.seller_id is not None and product.seller_id != params.seller_id:
        return False
    if params.available is not None and product.is_available != params.available:
        return False
    if params.labels is not None and not set(params.labels).issubset(product.labels):
        return False
    return True


def _sort_key(field: str):
    if field == "created_at":
        return lambda p: p.created_at or EPOCH_MIN
    if field == "name":
        return lambda p: p.name.lower()
    return lambda p: getattr(p, field)


def apply_search(products: List[Product], params: SearchParams) -> List[Product]:
    """
    Filter, sort and paginate. Unknown sort fields keep id order;
    sort_dir "desc" (case-insensitive) reverses, anything else is ascending.
    """
    found = sorted((p for p in products if matches(p, params)), key=lambda p: p.id or 0)
    if params.sort_by in SORT_FIELDS:
        descending = (params.sort_dir or "").lower() == "desc"
        found.sort(key=_sort_key(params.sort_by), reverse=descending)
    return found[params.offset : params.offset + params.limit]


class FileBackedProductService:
    def __init__(self, db: FileBackedDB, image_dir: str, image_base_url: str):
        self.db = db
        self.image_dir = image_dir
        self.image_base_url = image_base_url

    def _create(self, product: Product, images: Sequence[ImageSubmission]) -> int:
        product.created_at = product.created_at or datetime.now(timezone.utc)
        record = product.to_record()
        record["id"] = None
        saved = self.db.create_record("products", record, id_field="id")
        product_id = int(saved["id"])

        stored: List[ProductImage] = []
        try:
            for submission in images:
                result = save_image_submission(submission, product_id, self.image_dir)
                stored.append(ProductImage(
                    role=submission.role.value,
                    url=image_url(self.image_base_url, product_id, submission.role, result["original"]),
                ))
        except Exception as exc:
            # roll back the product row and any files already written
            delete_product_images(self.image_dir, product_id)
            self.db.delete_record("products", "id", product_id)
            raise ServiceError(f"failed to store images: {exc}", code=FAILED_TO_CREATE_PRODUCT) from exc

        self.db.update_record("products", "id", product_id, {"images": json.dumps([asdict(i) for i in stored])})
        product.images = stored
        logger.info("Created product %s with %d image(s)", product_id, len(stored))
        return product_id

    def _get(self, product_id: int) -> Product:
        row = self.db.get_record("products", "id", product_id)
        if not row:
            raise ProductNotFound(product_id)
        return Product.from_dict(row)

    def _search(self, params: SearchParams) -> List[Product]:
        try:
            rows = self.db.list_records("products")
        except (OSError, ValueError) as exc:
            raise ServiceError(f"failed to read products: {exc}", code=FAILED_TO_SEARCH_PRODUCTS) from exc
        return apply_search([Product.from_dict(r) for r in rows], params)

    async def create_product(self, product: Product, images: Sequence[ImageSubmission]) -> int:
        return await run_in_threadpool(self._create, product, images)

    async def get_product(self, product_id: int) -> Product:
        return await run_in_threadpool(self._get, product_id)

    async def search_products(self, params: SearchParams) -> List[Product]:
        return await run_in_threadpool(self._search, params)
