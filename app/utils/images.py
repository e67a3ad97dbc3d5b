# app/utils/images.py
import io
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Tuple
from PIL import Image, UnidentifiedImageError

from app.models.image import ImageRole, ImageSubmission

logger = logging.getLogger(__name__)

# safe image extensions we allow
ALLOWED_EXT = {".jpg", ".jpeg", ".png", ".webp", ".gif"}

# resized variants generated per role
ROLE_SIZES: Dict[ImageRole, List[Tuple[int, int]]] = {
    ImageRole.MAIN: [(1200, 1200), (300, 300)],
    ImageRole.THUMBNAIL: [(300, 300)],
    ImageRole.EXTRA: [(1200, 1200)],
}

def _ensure_dir(path: Path):
    path.mkdir(parents=True, exist_ok=True)

def _safe_ext(filename: str) -> str:
    _, ext = os.path.splitext(filename)
    return ext.lower()

def _make_filename(original_name: str, contents: bytes) -> str:
    # drop any client supplied directories
    name = Path(original_name).name or "upload.jpg"
    stem, ext = os.path.splitext(name)
    ext = ext.lower()
    if ext not in ALLOWED_EXT:
        # try to detect from bytes via PIL format
        try:
            im = Image.open(io.BytesIO(contents))
            ext = f".{im.format.lower()}" if im.format else ".jpg"
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError):
            ext = ".jpg"
    return f"{stem or 'upload'}{ext}"


def role_dir(base_dir: str, product_id: int, role: ImageRole) -> Path:
    return Path(base_dir) / "products" / str(product_id) / role.value


def save_image_submission(submission: ImageSubmission, product_id: int, base_dir: str) -> Dict[str, List[str]]:
    """
    Save a role-tagged image under base_dir/products/<product_id>/<role>/.
    Creates the original file and the resized variants for its role.
    Returns dict: {"original": "<fname>", "variants": ["<fname1>", ...]}
    """
    target_dir = role_dir(base_dir, product_id, submission.role)
    _ensure_dir(target_dir)

    contents = submission.image.content
    fname = _make_filename(submission.filename, contents)
    stem, ext = os.path.splitext(fname)
    n = 1
    while (target_dir / fname).exists():
        fname = f"{stem}_{n}{ext}"
        n += 1
    with open(target_dir / fname, "wb") as f:
        f.write(contents)

    saved = {"original": fname, "variants": []}

    try:
        im = Image.open(io.BytesIO(contents))
        im = im.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        # not decodable by PIL: keep the original only
        logger.debug("Skipping variants for %s: %s", fname, exc)
        return saved

    for w, h in ROLE_SIZES[submission.role]:
        im_copy = im.copy()
        im_copy.thumbnail((w, h))
        vname = f"{Path(fname).stem}_{w}x{h}.jpg"
        im_copy.save(target_dir / vname, format="JPEG", optimize=True, quality=85)
        saved["variants"].append(vname)

    return saved


def image_url(base_url: str, product_id: int, role: ImageRole, filename: str) -> str:
    return f"{base_url.rstrip('/')}/products/{product_id}/{role.value}/{filename}"


def delete_product_images(base_dir: str, product_id: int) -> None:
    """Remove every stored image of a product (used to undo a failed create)."""
    shutil.rmtree(Path(base_dir) / "products" / str(product_id), ignore_errors=True)
