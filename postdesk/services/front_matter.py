import logging
import re
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

import frontmatter
from frontmatter.default_handlers import BaseHandler

logger = logging.getLogger(__name__)

DELIMITER = "---"

MetadataValue = Union[str, List[str]]


class _ScanState(Enum):
    IN_METADATA = "in_metadata"
    IN_BODY = "in_body"


class SimpleFrontMatterHandler(BaseHandler):
    """
    Front matter made of flat ``key: value`` lines between two ``---`` lines.

    Values of the form ``[a, b]`` are lists of text, everything else stays text.
    Unlike the YAML handler nothing is type-coerced, so dates and titles with
    colons survive a round trip unchanged.
    """

    FM_BOUNDARY = re.compile(r"^-{3}$", re.MULTILINE)
    START_DELIMITER = DELIMITER
    END_DELIMITER = DELIMITER

    def detect(self, text: str) -> bool:
        return _normalize_newlines(text).split("\n", 1)[0] == DELIMITER

    def split(self, text: str) -> Tuple[str, str]:
        """
        Split into (metadata block, body) honoring only the first closing delimiter.
        Raises ValueError when the text has no complete front matter block.
        """
        lines = _normalize_newlines(text).split("\n")
        if not lines or lines[0] != DELIMITER:
            raise ValueError("first line is not a front matter delimiter")

        state = _ScanState.IN_METADATA
        metadata_lines: List[str] = []
        body_lines: List[str] = []
        for line in lines[1:]:
            if state is _ScanState.IN_METADATA:
                if line == DELIMITER:
                    state = _ScanState.IN_BODY
                    continue
                metadata_lines.append(line)
            else:
                body_lines.append(line)

        if state is not _ScanState.IN_BODY:
            raise ValueError("front matter block is not closed")
        return "\n".join(metadata_lines), "\n".join(body_lines)

    def load(self, fm: str) -> Dict[str, MetadataValue]:
        metadata: Dict[str, MetadataValue] = {}
        for line in fm.split("\n"):
            key, sep, value = line.partition(":")
            if not sep:
                continue
            metadata[key.strip()] = parse_value(value.strip())
        return metadata

    def export(self, metadata: Mapping[str, object], **kwargs) -> str:
        return "\n".join(
            f"{key}: {format_value(value)}" for key, value in metadata.items()
        )

    def format(self, post: frontmatter.Post, **kwargs) -> str:
        metadata = self.export(post.metadata, **kwargs)
        return f"{DELIMITER}\n{metadata}\n{DELIMITER}\n\n{post.content}\n"


HANDLER = SimpleFrontMatterHandler()


class PostRecord(frontmatter.Post):
    """A parsed post file: ordered metadata plus the Markdown body."""

    def __init__(self, body: str, metadata: Optional[Mapping[str, object]] = None):
        super().__init__(body, handler=HANDLER)
        self.metadata.update(metadata or {})

    @property
    def body(self) -> str:
        return self.content

    @property
    def title(self) -> str:
        return _as_text(self.metadata.get("title"))

    @property
    def date(self) -> str:
        return _as_text(self.metadata.get("date"))

    @property
    def tags(self) -> List[str]:
        value = self.metadata.get("tags")
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]

    @property
    def categories(self) -> str:
        return _as_text(self.metadata.get("categories"))

    @property
    def has_front_matter(self) -> bool:
        return bool(self.metadata)


def parse(raw_text: str) -> PostRecord:
    """Parse a post file's text. Missing or unclosed front matter degrades to body-only."""
    try:
        fm, body = HANDLER.split(raw_text)
    except ValueError as e:
        logger.debug(f"Treating text as body without front matter: {e}")
        return PostRecord(trim_blank_lines(_normalize_newlines(raw_text)))

    return PostRecord(trim_blank_lines(body), HANDLER.load(fm))


def serialize(metadata: Mapping[str, object], body: str) -> str:
    post = PostRecord(body, metadata)
    return frontmatter.dumps(post, handler=HANDLER)


def parse_value(value: str) -> MetadataValue:
    if value.startswith("[") and value.endswith("]"):
        return [item.strip() for item in value[1:-1].split(",") if item.strip()]
    return value


def format_value(value: object) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(str(item) for item in value) + "]"
    if value is None:
        return ""
    return str(value)


def trim_blank_lines(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)
