# app/api/deps.py
from functools import lru_cache

from app.config import settings
from app.database import db
from app.services.catalog import ProductService
from app.services.product_service import FileBackedProductService


@lru_cache()
def get_product_service() -> ProductService:
    """
    Dependency that returns the catalog service the product routes talk to.
    Tests swap it through `app.dependency_overrides[get_product_service]`.
    """
    return FileBackedProductService(db, settings.image_dir, settings.IMAGE_BASE_URL)
