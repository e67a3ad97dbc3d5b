from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from app.models.product import Product


class ProductCreate(BaseModel):
    """JSON payload carried in the `product` field of a create request."""
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(..., gt=0)
    category_id: str = Field(..., min_length=1)
    seller_id: int = Field(..., gt=0)
    stock: int = Field(0, ge=0)
    is_available: bool = False
    labels: Optional[List[str]] = None

    # a string is not a number here; unknown keys are ignored
    model_config = ConfigDict(strict=True, extra="ignore")

    @field_validator("description", "stock", "is_available", mode="before")
    @classmethod
    def null_means_default(cls, value, info: ValidationInfo):
        # JSON null on an optional field reads as its default
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    def to_product(self) -> Product:
        return Product(
            name=self.name,
            description=self.description,
            price=self.price,
            category_id=self.category_id,
            seller_id=self.seller_id,
            stock=self.stock,
            is_available=self.is_available,
            labels=list(self.labels or []),
        )


class ProductImageOut(BaseModel):
    role: str
    url: str


class ProductOut(BaseModel):
    id: Optional[int] = None
    name: str
    description: str
    price: float
    category_id: str
    seller_id: int
    stock: int
    is_available: bool
    labels: List[str]
    images: List[ProductImageOut] = []
    created_at: Optional[str] = None


class ErrorResponse(BaseModel):
    code: str
    message: str
