# app/models/search.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional, Tuple
import math
import re

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_HEX_FLOAT_RE = re.compile(r"[+-]?0[xX]([0-9a-fA-F]+(\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)[pP][+-]?\d+", re.ASCII)
_SPECIAL_FLOAT_RE = re.compile(r"([+-]?)(inf|infinity)|nan", re.ASCII | re.IGNORECASE)

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_int64(raw: Optional[str]) -> Optional[int]:
    """Parse a signed base-10 64-bit integer. Returns None on anything else."""
    if not raw or not _INT_RE.fullmatch(raw):
        return None
    # int64 has at most 19 significant digits
    if len(raw.lstrip("+-").lstrip("0")) > 19:
        return None
    value = int(raw)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_decimal(raw: Optional[str]) -> Optional[float]:
    """
    Parse a float: decimal ("12", "-3.5", "1e3"), hex with a binary exponent
    ("0x1p-2"), or inf / infinity / nan in any case (only the infinities take a
    sign). Finite literals that overflow to infinity, whitespace and
    underscores give None.
    """
    if not raw:
        return None
    special = _SPECIAL_FLOAT_RE.fullmatch(raw)
    if special:
        if special.group(2) is None:
            return math.nan
        return -math.inf if special.group(1) == "-" else math.inf
    if _HEX_FLOAT_RE.fullmatch(raw):
        try:
            return float.fromhex(raw)
        except OverflowError:
            return None
    if not _FLOAT_RE.fullmatch(raw):
        return None
    value = float(raw)
    return None if math.isinf(value) else value


@dataclass(frozen=True)
class SearchParams:
    """
    Typed, immutable product filter built from query-string input.

    Every filter is optional; None means "no filter". Pagination always has a
    value (limit 10, offset 0 unless overridden).
    """
    query: Optional[str] = None
    category_id: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    seller_id: Optional[int] = None
    available: Optional[bool] = None
    labels: Optional[Tuple[str, ...]] = None
    sort_by: Optional[str] = None
    sort_dir: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "SearchParams":
        """
        Build search parameters from a key -> value mapping of query params.

        Malformed filters degrade to "no filter" instead of failing the request:
          - limit: only a positive integer overrides the default of 10
          - offset: only a non-negative integer overrides the default of 0
          - min_price / max_price: only non-negative numbers are kept (nan is dropped)
          - seller_id: only positive integers are kept
          - available: "true" / "1" -> True, any other non-empty value -> False
          - labels: comma separated, tokens kept as-is (no trim, no dedup)
        Never raises.
        """
        def text(key: str) -> Optional[str]:
            return query.get(key) or None

        limit = parse_int64(text("limit"))
        if limit is None or limit <= 0:
            limit = DEFAULT_LIMIT

        offset = parse_int64(text("offset"))
        if offset is None or offset < 0:
            offset = DEFAULT_OFFSET

        min_price = parse_decimal(text("min_price"))
        if min_price is not None and not min_price >= 0:
            min_price = None

        max_price = parse_decimal(text("max_price"))
        if max_price is not None and not max_price >= 0:
            max_price = None

        seller_id = parse_int64(text("seller_id"))
        if seller_id is not None and seller_id <= 0:
            seller_id = None

        available = None
        available_raw = text("available")
        if available_raw is not None:
            # anything but "true"/"1" reads as False, not as unset
            available = available_raw in ("true", "1")

        labels = None
        labels_raw = text("labels")
        if labels_raw is not None:
            labels = tuple(labels_raw.split(","))

        return cls(
            query=text("query"),
            category_id=text("category_id"),
            min_price=min_price,
            max_price=max_price,
            seller_id=seller_id,
            available=available,
            labels=labels,
            sort_by=text("sort_by"),
            sort_dir=text("sort_dir"),
            limit=limit,
            offset=offset,
        )

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["labels"] = list(self.labels) if self.labels is not None else None
        return out
