from fastapi import Request, status

from app.config import settings
from app.core.errors import INVALID_REQUEST_BODY, error_response

def add_body_limit(app):
    @app.middleware("http")
    async def body_limit_mw(request: Request, call_next):
        # reject oversized uploads from the declared length, before any parsing
        declared = request.headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > settings.MAX_UPLOAD_BYTES:
            return error_response(
                status.HTTP_400_BAD_REQUEST,
                INVALID_REQUEST_BODY,
                f"Request body exceeds {settings.MAX_UPLOAD_BYTES} bytes",
            )
        return await call_next(request)
