# app/models/product.py
from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
import json


def _parse_json_list(raw: Any) -> List[Any]:
    """Tables store list columns as JSON strings; decode leniently."""
    if isinstance(raw, list):
        return raw
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return parsed if isinstance(parsed, list) else []


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "y", "t")
    return bool(raw)


@dataclass
class ProductImage:
    role: str
    url: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProductImage":
        return cls(role=str(d.get("role") or ""), url=str(d.get("url") or ""))


@dataclass
class Product:
    """
    Catalog product. `id` is assigned by the persistence layer and is None
    until the product has been created. CSV-backed storage hands everything
    back as strings, so `from_dict` converts to proper types.
    """
    id: Optional[int] = None
    name: str = ""
    description: str = ""
    price: float = 0.0
    category_id: str = ""
    seller_id: int = 0
    stock: int = 0
    is_available: bool = False
    labels: List[str] = field(default_factory=list)
    images: List[ProductImage] = field(default_factory=list)
    created_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Product":
        if d is None:
            raise ValueError("Cannot construct Product from None")

        id_raw = d.get("id")
        try:
            id_val = int(float(id_raw)) if id_raw not in (None, "") else None
        except (TypeError, ValueError):
            id_val = None

        try:
            price = float(d.get("price") or 0.0)
        except (TypeError, ValueError):
            price = 0.0

        try:
            seller_id = int(float(d.get("seller_id") or 0))
        except (TypeError, ValueError):
            seller_id = 0

        try:
            stock = int(float(d.get("stock") or 0))
        except (TypeError, ValueError):
            stock = 0

        created_at_raw = d.get("created_at")
        created_at = None
        if isinstance(created_at_raw, datetime):
            created_at = created_at_raw
        elif created_at_raw:
            try:
                created_at = datetime.fromisoformat(str(created_at_raw))
            except ValueError:
                created_at = None
        # rows written without an offset are UTC
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            id=id_val,
            name=str(d.get("name") or ""),
            description=str(d.get("description") or ""),
            price=price,
            category_id=str(d.get("category_id") or ""),
            seller_id=seller_id,
            stock=stock,
            is_available=_parse_bool(d.get("is_available")),
            labels=[str(label) for label in _parse_json_list(d.get("labels"))],
            images=[ProductImage.from_dict(i) for i in _parse_json_list(d.get("images")) if isinstance(i, dict)],
            created_at=created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        if self.created_at and isinstance(self.created_at, datetime):
            out["created_at"] = self.created_at.isoformat(sep=" ")
        else:
            out["created_at"] = None
        return out

    def to_record(self) -> Dict[str, Any]:
        """Flatten into a table row; list columns become JSON strings."""
        out = self.to_dict()
        out["labels"] = json.dumps(list(self.labels))
        out["images"] = json.dumps([asdict(i) for i in self.images])
        out["created_at"] = out["created_at"] or ""
        return out
