"""
Decoding of the multipart create-product request.

The `product` form field carries a JSON document. It is decoded in two stages:
raw text -> generic JSON value (json.loads), then generic value -> ProductCreate,
whose field constraints (required, numeric bounds) are declared on the model.
"""
import json
import logging
from typing import List, Tuple

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from app.api.schemas.product import ProductCreate
from app.config import settings
from app.core.errors import InvalidRequestBody
from app.models.image import ImageSubmission, UploadedImage
from app.services.image_classifier import classify_images, has_primary_image

logger = logging.getLogger(__name__)

PRODUCT_FIELD = "product"
MAIN_IMAGES_FIELD = "main_images"
THUMBNAIL_IMAGES_FIELD = "thumbnail_images"
EXTRA_IMAGES_FIELD = "extra_images"


def _format_validation_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ())) or "product"
    return f"Invalid product data: {loc}: {err.get('msg')}"


def parse_product_payload(raw: str) -> ProductCreate:
    """Decode and validate the JSON payload of the `product` form field."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        logger.error("Failed to decode product data", extra={"operation": "create_product", "error": str(exc)})
        raise InvalidRequestBody("Invalid product data format") from exc
    if not isinstance(data, dict):
        raise InvalidRequestBody("Invalid product data format")

    try:
        return ProductCreate.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestBody(_format_validation_error(exc)) from exc


async def _read_group(form, field: str) -> List[UploadedImage]:
    images = []
    for item in form.getlist(field):
        if not isinstance(item, UploadFile):
            continue
        content = await item.read()
        images.append(UploadedImage(filename=item.filename or "", content=content, content_type=item.content_type))
    return images


class BodyTooLarge(MultiPartException):
    """Raised mid-stream once the request body passes the upload ceiling."""


def _capped_receive(receive, limit: int):
    """Wrap an ASGI receive callable so reading stops once `limit` bytes have arrived."""
    received = 0

    async def capped():
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise BodyTooLarge(f"Request body exceeds {limit} bytes")
        return message

    return capped


async def decode_create_product_form(request: Request) -> Tuple[ProductCreate, List[ImageSubmission]]:
    """
    Turn a multipart create request into a validated payload plus the
    role-tagged images (main, then thumbnail, then extra).
    Raises InvalidRequestBody on any malformed or incomplete input.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise InvalidRequestBody("Failed to parse multipart form")

    try:
        # bodies without Content-Length are capped while they stream in
        capped = Request(request.scope, _capped_receive(request.receive, settings.MAX_UPLOAD_BYTES))
        form = await capped.form()
    except (MultiPartException, StarletteHTTPException) as exc:
        logger.error("Failed to parse multipart form", extra={"operation": "create_product", "error": str(exc)})
        raise InvalidRequestBody("Failed to parse multipart form") from exc

    try:
        values = form.getlist(PRODUCT_FIELD)
        raw = values[0] if values else None
        if not isinstance(raw, str) or raw == "":
            raise InvalidRequestBody("Product data is required")

        payload = parse_product_payload(raw)

        images = classify_images(
            await _read_group(form, MAIN_IMAGES_FIELD),
            await _read_group(form, THUMBNAIL_IMAGES_FIELD),
            await _read_group(form, EXTRA_IMAGES_FIELD),
        )
    finally:
        await form.close()

    if not has_primary_image(images):
        raise InvalidRequestBody("At least one main or thumbnail image is required")

    return payload, images
