from __future__ import annotations
from typing import Any, Dict

from fastapi import status
from fastapi.responses import JSONResponse

# Error codes are part of the public API contract: never change their meaning.
INVALID_REQUEST_BODY = "invalid-request-body"
INVALID_PRODUCT_ID = "invalid-product-id"
FAILED_TO_ENCODE_PRODUCT = "failed-to-encode-product"


class ApiError(Exception):
    """An error surfaced to the client as the {code, message} envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class InvalidRequestBody(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(INVALID_REQUEST_BODY, message)


class InvalidProductID(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid product ID"):
        super().__init__(INVALID_PRODUCT_ID, message)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})
