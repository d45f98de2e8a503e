import os
import re
from typing import Iterable, Tuple

from postdesk.errors import PostNotFoundError

SLUG_MAX_LENGTH = 50
SLUG_PLACEHOLDER = "untitled"
POST_EXTENSION = ".md"

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9_一-龥-]")
_DISALLOWED_LOWER = re.compile(r"[^a-z0-9一-龥]")
_HYPHEN_RUNS = re.compile(r"-+")
_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}-")


def sanitize_slug(text: str, lowercase: bool = False) -> str:
    """
    Turn free text into a filesystem-safe slug.

    The default keeps case: whitespace runs become hyphens and anything outside
    ASCII word characters, CJK ideographs and hyphens is dropped. With
    ``lowercase=True`` (used for image directories) disallowed characters become
    hyphens instead, and hyphen runs collapse. Either way the result is capped at
    50 characters and never empty.
    """
    text = (text or "").strip()
    if lowercase:
        slug = _DISALLOWED_LOWER.sub("-", text.lower())
        slug = _HYPHEN_RUNS.sub("-", slug).strip("-")
    else:
        slug = _DISALLOWED.sub("", _WHITESPACE.sub("-", text))
    return slug[:SLUG_MAX_LENGTH] or SLUG_PLACEHOLDER


def derive_filename(title: str, date: str) -> Tuple[str, str]:
    slug = sanitize_slug(title)
    return slug, f"{date[:10]}-{slug}{POST_EXTENSION}"


def resolve_existing(identifier: str, filenames: Iterable[str]) -> str:
    """
    Return the first filename (in listing order) whose stem contains the
    identifier or ends with ``-<identifier>``.
    """
    if not identifier:
        raise PostNotFoundError(identifier)

    suffix = f"-{identifier}"
    for filename in filenames:
        stem, _ = os.path.splitext(filename)
        if identifier in stem or stem.endswith(suffix):
            return filename
    raise PostNotFoundError(identifier)


def slug_from_filename(filename: str) -> str:
    stem, _ = os.path.splitext(os.path.basename(filename))
    return _DATE_PREFIX.sub("", stem) or stem


def permalink_for(date: str, slug: str) -> str:
    """Hexo's default ``:year/:month/:day/:title/`` permalink."""
    year, month, day = date[:4], date[5:7], date[8:10]
    return f"{year}/{month}/{day}/{slug}/"
