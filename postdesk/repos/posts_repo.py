import logging
import os
from pathlib import Path
from typing import List

from postdesk.services.slugs import POST_EXTENSION

logger = logging.getLogger(__name__)


class FilePostsRepo:
    """Post files in a single directory. The directory listing is the source of truth."""

    def __init__(self, posts_dir: Path | str):
        self.posts_dir = Path(posts_dir)

    def list_filenames(self) -> List[str]:
        """Post filenames in filesystem listing order (not sorted)."""
        if not self.posts_dir.is_dir():
            return []
        return [
            entry.name
            for entry in os.scandir(self.posts_dir)
            if entry.is_file() and entry.name.endswith(POST_EXTENSION)
        ]

    def read(self, filename: str) -> str:
        return self._path(filename).read_text(encoding="utf-8")

    def write(self, filename: str, text: str) -> None:
        """Write through a temp file so a failed write never truncates an existing post."""
        self.posts_dir.mkdir(parents=True, exist_ok=True)
        target = self._path(filename)
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            tmp.write_text(text, encoding="utf-8")
            os.replace(tmp, target)
        finally:
            if tmp.exists():
                tmp.unlink()
        logger.info(f"Wrote post file {target}")

    def delete(self, filename: str) -> None:
        self._path(filename).unlink()
        logger.info(f"Deleted post file {filename}")

    def exists(self, filename: str) -> bool:
        return self._path(filename).is_file()

    def _path(self, filename: str) -> Path:
        name = os.path.basename(filename)
        if not name or name != filename:
            raise ValueError(f"Invalid post filename: {filename!r}")
        return self.posts_dir / name
