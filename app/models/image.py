# app/models/image.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ImageRole(str, Enum):
    MAIN = "main"
    THUMBNAIL = "thumbnail"
    EXTRA = "extra"


@dataclass(frozen=True)
class UploadedImage:
    """An uploaded file, fully buffered. Content is never inspected by the API layer."""
    filename: str
    content: bytes
    content_type: Optional[str] = None


@dataclass(frozen=True)
class ImageSubmission:
    """
    An uploaded image tagged with the role it was submitted under.

    The role travels as a field instead of being folded into the file name;
    `tagged_name` still gives the flat "<role>:<filename>" form.
    """
    role: ImageRole
    image: UploadedImage

    @property
    def filename(self) -> str:
        return self.image.filename

    @property
    def tagged_name(self) -> str:
        return f"{self.role.value}:{self.image.filename}"
