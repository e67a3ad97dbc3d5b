# tests/conftest.py
import os
import sys
import tempfile
import shutil
from pathlib import Path
import io
from PIL import Image

import pytest
from fastapi.testclient import TestClient

# ensure project root is importable
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# point data and image dirs at a temp location before app modules are imported,
# so the module-level db and the static mount pick them up
_tmp_root = Path(tempfile.mkdtemp(prefix="test_catalog_"))
from app import config as app_config  # keep after tmpdir creation
app_config.settings.DATA_DIR = _tmp_root / "data"
app_config.settings.image_dir = str(_tmp_root / "images")

from app.main import app  # noqa: E402
from app.api.deps import get_product_service  # noqa: E402
from app.services.catalog import ProductNotFound  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def temp_catalog_root():
    """Remove the temp data/image root once the session is done."""
    try:
        yield _tmp_root
    finally:
        shutil.rmtree(_tmp_root, ignore_errors=True)


class FakeProductService:
    """
    In-memory stand-in for the catalog service. Records every call so tests can
    assert what reached the service (or that nothing did).
    Set `error` to make every call fail with it.
    """

    def __init__(self):
        self.calls = []
        self.products = {}
        self.next_id = 1
        self.error = None
        self.search_result = None

    async def create_product(self, product, images):
        self.calls.append(("create_product", product, list(images)))
        if self.error:
            raise self.error
        pid = self.next_id
        self.next_id += 1
        self.products[pid] = product
        return pid

    async def get_product(self, product_id):
        self.calls.append(("get_product", product_id))
        if self.error:
            raise self.error
        if product_id not in self.products:
            raise ProductNotFound(product_id)
        return self.products[product_id]

    async def search_products(self, params):
        self.calls.append(("search_products", params))
        if self.error:
            raise self.error
        if self.search_result is not None:
            return self.search_result
        return list(self.products.values())


@pytest.fixture
def fake_service():
    return FakeProductService()


@pytest.fixture
def client(fake_service):
    app.dependency_overrides[get_product_service] = lambda: fake_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_sample_jpeg_bytes():
    """
    Return a callable that generates JPEG bytes for tests that need image uploads.
    Usage: jpg = make_sample_jpeg_bytes(size=(200,200))
    """
    def _fn(size=(200, 200), color=(180, 120, 60)):
        bio = io.BytesIO()
        im = Image.new("RGB", size, color)
        im.save(bio, format="JPEG", quality=85)
        bio.seek(0)
        return bio.read()
    return _fn


@pytest.fixture
def product_payload():
    return {
        "name": "Oak Side Table",
        "description": "Solid oak, hand finished",
        "price": 149.5,
        "category_id": "furniture",
        "seller_id": 7,
        "stock": 3,
        "is_available": True,
        "labels": ["oak", "handmade"],
    }
