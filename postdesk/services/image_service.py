import datetime
import logging
import os
import posixpath
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from postdesk.errors import ImageNotFoundError, ImageUploadError
from postdesk.services.slugs import sanitize_slug

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
_ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|webp")


@dataclass(frozen=True)
class ImageAsset:
    filename: str
    size: int
    path: str
    url: str
    original_name: Optional[str] = None


class ImageService:
    """
    Uploaded images under ``<root>/<YYYY>/<MM>/<blog-dir>/``.
    URLs are derived from the storage location only.
    """

    def __init__(
        self,
        root: Path | str,
        url_prefix: str = "/images",
        max_bytes: int = 10 * 1024 * 1024,
    ):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_bytes = max_bytes

    def save(
        self,
        data: bytes,
        original_name: str,
        content_type: Optional[str],
        blog_title: Optional[str] = None,
        now: Optional[datetime.datetime] = None,
    ) -> ImageAsset:
        validate_upload(original_name, content_type, len(data), self.max_bytes)

        now = now or datetime.datetime.now()
        blog_dir = sanitize_slug(blog_title or "untitled", lowercase=True)
        filename = generate_filename(original_name)
        rel_path = f"{now.year}/{now.month:02d}/{blog_dir}/{filename}"

        target = self.root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"Saved image {target} ({len(data)} bytes)")

        return ImageAsset(
            filename=filename,
            size=len(data),
            path=rel_path,
            url=self.url_for(rel_path),
            original_name=original_name,
        )

    def list_images(self, year: str, month: str, blog: str) -> List[ImageAsset]:
        rel_dir = posixpath.join(year, month, blog)
        directory = self._resolve(rel_dir)
        if not directory.is_dir():
            raise ImageNotFoundError(rel_dir)

        images = []
        for name in sorted(os.listdir(directory)):
            full = directory / name
            if full.is_file() and name.lower().endswith(IMAGE_EXTENSIONS):
                rel_path = f"{rel_dir}/{name}"
                images.append(
                    ImageAsset(
                        filename=name,
                        size=full.stat().st_size,
                        path=rel_path,
                        url=self.url_for(rel_path),
                    )
                )
        return images

    def delete(self, image_path: str) -> str:
        """Delete ``images/<relative path>``. Paths escaping the image root are rejected."""
        normalized = posixpath.normpath(image_path.replace("\\", "/").lstrip("/"))
        if not normalized.startswith("images/"):
            raise ValueError(f"Invalid image path: {image_path}")

        target = self._resolve(normalized[len("images/"):])
        if not target.is_file():
            raise ImageNotFoundError(image_path)
        target.unlink()
        logger.info(f"Deleted image {target}")
        return normalized

    def url_for(self, rel_path: str) -> str:
        return f"{self.url_prefix}/{rel_path}"

    def _resolve(self, rel_path: str) -> Path:
        root = self.root.resolve()
        target = (root / rel_path).resolve()
        if target != root and root not in target.parents:
            raise ValueError(f"Invalid image path: {rel_path}")
        return target


def validate_upload(
    original_name: str, content_type: Optional[str], size: int, max_bytes: int
) -> None:
    ext = os.path.splitext(original_name or "")[1].lower()
    if ext not in IMAGE_EXTENSIONS or not _ALLOWED_TYPES.search(content_type or ""):
        raise ImageUploadError(
            "Only image files are supported (jpeg, jpg, png, gif, webp)"
        )
    if size > max_bytes:
        raise ImageUploadError(f"Image exceeds the {max_bytes} byte limit")


def generate_filename(original_name: str) -> str:
    ext = os.path.splitext(original_name)[1]
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext}"

