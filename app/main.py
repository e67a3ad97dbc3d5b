# app/main.py
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
import logging
from pathlib import Path
from contextlib import asynccontextmanager

from app.config import settings
from app.api.routes import products as product_routes
from app.core.errors import INVALID_REQUEST_BODY, ApiError, error_response
from app.middleware.cors_config import configure_cors
from app.middleware.body_limit import add_body_limit

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context: make sure the data and image directories exist before
    the app starts serving.
    """
    # --- startup logic ---
    for label, path in (("data", Path(settings.DATA_DIR)), ("image", Path(settings.image_dir))):
        if not path.exists():
            logger.warning("%s directory %s not found, creating it", label.capitalize(), path)
            path.mkdir(parents=True, exist_ok=True)
        else:
            logger.info("Using %s directory: %s", label, path)

    yield
    # --- shutdown logic ---
    logger.info("Shutting down Product Catalog API")

app = FastAPI(title="Product Catalog API", version="0.1.0", lifespan=lifespan)
configure_cors(app)
add_body_limit(app)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    logger.warning(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        exc.message,
        extra={"code": exc.code, "status_code": exc.status_code},
    )
    return error_response(exc.status_code, exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_BODY, message)


# Serve stored product images when they are addressed by a local path
if settings.IMAGE_BASE_URL.startswith("/"):
    app.mount(settings.IMAGE_BASE_URL.rstrip("/"), StaticFiles(directory=settings.image_dir, check_dir=False), name="images")

app.include_router(product_routes.router)


@app.get("/", tags=["root"])
async def root():
    return {"status": "ok", "service": "Product Catalog API"}
