import datetime
import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from postdesk.errors import (
    MalformedInputError,
    PartialWriteError,
    PostConflictError,
    PostWriteError,
)
from postdesk.schemas.blog import PostDetail, PostPayload, PostSummary, PostWriteResult
from postdesk.services.front_matter import (
    PostRecord,
    parse,
    serialize,
    trim_blank_lines,
)
from postdesk.services.slugs import (
    derive_filename,
    permalink_for,
    resolve_existing,
    slug_from_filename,
)

logger = logging.getLogger(__name__)

KNOWN_KEYS = ("title", "date", "tags", "categories")
_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True)
class PostWrite:
    """What a create/update should do on disk."""

    old_filename: Optional[str]
    filename: str
    slug: str
    date: str
    text: str

    @property
    def renames(self) -> bool:
        return self.old_filename is not None and self.old_filename != self.filename


def summarize_posts(files: Iterable[Tuple[str, str]]) -> List[dict]:
    summaries = []
    for filename, raw_text in files:
        record = parse(raw_text)
        slug = slug_from_filename(filename)
        summaries.append(
            {
                "filename": filename,
                "slug": slug,
                "title": _derive_title(record, slug),
                "date": record.date or None,
                "tags": record.tags,
                "categories": record.categories,
            }
        )
    return summaries


def plan_get(
    identifier: str, filenames: Sequence[str], read: Callable[[str], str]
) -> Tuple[str, PostRecord]:
    filename = resolve_existing(identifier, filenames)
    return filename, parse(read(filename))


def plan_create(
    title: str,
    date: Optional[str],
    tags: Sequence[str],
    categories: str,
    body: str,
) -> PostWrite:
    title, body = _require_fields(title, body)
    date = _require_date(date or _now_iso())
    metadata = _build_metadata(title, date, tags, categories)
    slug, filename = derive_filename(title, date)
    return PostWrite(None, filename, slug, date, serialize(metadata, body))


def plan_update(
    identifier: str,
    title: str,
    date: Optional[str],
    tags: Sequence[str],
    categories: str,
    body: str,
    filenames: Sequence[str],
    read: Callable[[str], str],
) -> PostWrite:
    title, body = _require_fields(title, body)
    old_filename, existing = plan_get(identifier, filenames, read)
    date = _require_date(date or existing.date or _now_iso())

    # carry unknown front matter keys over, in their original order
    metadata: Dict[str, object] = dict(existing.metadata)
    metadata.update(_build_metadata(title, date, tags, categories))

    slug, filename = derive_filename(title, date)
    if filename != old_filename and filename in filenames:
        raise PostConflictError(filename)
    return PostWrite(old_filename, filename, slug, date, serialize(metadata, body))


def plan_delete(identifier: str, filenames: Sequence[str]) -> str:
    return resolve_existing(identifier, filenames)


class PostsService:
    def __init__(self, repo):
        self.repo = repo

    def list_posts(self) -> List[PostSummary]:
        files = []
        for filename in self.repo.list_filenames():
            try:
                files.append((filename, self.repo.read(filename)))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Skipping unreadable post {filename}: {e}")

        posts = summarize_posts(files)
        posts.sort(key=lambda x: x.get("date") or "", reverse=True)
        return [PostSummary(**p) for p in posts]

    def get_post(self, identifier: str) -> PostDetail:
        filename, record = plan_get(
            identifier, self.repo.list_filenames(), self.repo.read
        )
        slug = slug_from_filename(filename)
        return PostDetail(
            filename=filename,
            slug=slug,
            title=_derive_title(record, slug),
            date=record.date or None,
            tags=record.tags,
            categories=record.categories,
            body=record.body,
            metadata={
                k: v for k, v in record.metadata.items() if k not in KNOWN_KEYS
            },
        )

    def create_post(self, payload: PostPayload) -> PostWriteResult:
        plan = plan_create(
            payload.title, payload.date, payload.tags, payload.categories, payload.body
        )
        self._write(plan)
        logger.info(f"Created post {plan.filename}")
        return self._result(plan, "Post created")

    def update_post(self, identifier: str, payload: PostPayload) -> PostWriteResult:
        _require_fields(payload.title, payload.body)
        plan = plan_update(
            identifier,
            payload.title,
            payload.date,
            payload.tags,
            payload.categories,
            payload.body,
            self.repo.list_filenames(),
            self.repo.read,
        )
        self._write(plan)

        # the new file is the durable copy; only now drop the old one
        if plan.renames:
            try:
                self.repo.delete(plan.old_filename)
            except OSError as e:
                logger.error(
                    f"Renamed {plan.old_filename} -> {plan.filename} "
                    f"but old file could not be removed: {e}"
                )
                raise PartialWriteError(plan.old_filename, plan.filename, str(e)) from e
            logger.info(f"Renamed post {plan.old_filename} -> {plan.filename}")
        else:
            logger.info(f"Updated post {plan.filename}")
        return self._result(plan, "Post updated")

    def delete_post(self, identifier: str) -> str:
        filename = plan_delete(identifier, self.repo.list_filenames())
        self.repo.delete(filename)
        logger.info(f"Deleted post {filename}")
        return filename

    def _write(self, plan: PostWrite) -> None:
        try:
            self.repo.write(plan.filename, plan.text)
        except OSError as e:
            logger.error(f"Failed to write post {plan.filename}: {e}")
            raise PostWriteError(f"Failed to write {plan.filename}") from e

    @staticmethod
    def _result(plan: PostWrite, message: str) -> PostWriteResult:
        return PostWriteResult(
            message=message,
            filename=plan.filename,
            slug=plan.slug,
            path=permalink_for(plan.date, plan.slug),
            previousFilename=plan.old_filename if plan.renames else None,
        )


def _require_fields(title: Optional[str], body: Optional[str]) -> Tuple[str, str]:
    title = (title or "").strip()
    if not title:
        raise MalformedInputError("title is required")
    if not (body or "").strip():
        raise MalformedInputError("body is required")
    return title, trim_blank_lines(body)


def _require_date(date: str) -> str:
    if not _DATE_PREFIX.match(date):
        raise MalformedInputError("date must start with YYYY-MM-DD")
    return date


def _build_metadata(
    title: str, date: str, tags: Sequence[str], categories: Optional[str]
) -> Dict[str, object]:
    return {
        "title": _single_line(title),
        "date": _single_line(date),
        "tags": [_single_line(t) for t in tags or [] if t and t.strip()],
        "categories": _single_line(categories or ""),
    }


def _single_line(value: str) -> str:
    # a newline inside a value would end the front matter line early
    return " ".join(value.splitlines()).strip()


def _derive_title(record: PostRecord, slug: str) -> str:
    if record.title:
        return record.title
    return slug.replace("-", " ").replace("_", " ").title()


def _now_iso() -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
