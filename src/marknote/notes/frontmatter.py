"""Front-matter parsing — tags, title and body from raw note text.

Parsing never fails the caller: malformed front matter degrades to "no
tags" with the full original text as the body, and the problem is
reported as a warning string on the result.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import frontmatter
import yaml

logger = logging.getLogger(__name__)

# Level-1 heading only: "# Title", not "## Section" or "#tag". A closing
# "#" run is only stripped when whitespace precedes it ("# Learn C#" keeps it).
TITLE_PATTERN = re.compile(r"^#\s+(.+?)(?:\s+#+)?\s*$")

_YAML = frontmatter.YAMLHandler()


@dataclass(frozen=True, slots=True)
class ParsedNote:
    """Result of parsing raw note text."""

    tags: list[str] = field(default_factory=list)
    title: str = ""
    body: str = ""
    warning: str | None = None


def parse_note_text(text: str, stem: str) -> ParsedNote:
    """Split raw note text into tags, title and body.

    The title is the leading level-1 heading of the body, falling back to
    the filename *stem*. The heading line is not part of the returned body.
    """
    metadata, remainder, warning = _split_front_matter(text)
    if warning is not None:
        logger.debug("Front matter parse failed for %s: %s", stem, warning)
    tags = normalize_tags(metadata.get("tags")) if metadata is not None else []

    title, body = _split_title(remainder)
    return ParsedNote(tags=tags, title=title or stem, body=body, warning=warning)


def normalize_tags(value: object) -> list[str]:
    """Coerce a front-matter ``tags`` value into an ordered, de-duplicated list."""
    if value is None:
        return []
    if isinstance(value, str):
        items: list[object] = list(value.split(","))
    elif isinstance(value, list | tuple):
        items = list(value)
    else:
        return []

    tags: list[str] = []
    for item in items:
        if item is None:
            continue
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def set_tags(text: str, tags: list[str]) -> str:
    """Return *text* with its front matter ``tags`` replaced by *tags*.

    Other metadata keys are preserved. Text without (or with unreadable)
    front matter gets a new block prepended.
    """
    metadata, remainder, _ = _split_front_matter(text)
    if metadata is None:
        post = frontmatter.Post(text)
    else:
        post = frontmatter.Post(remainder.strip())
        post.metadata.update(metadata)

    post["tags"] = normalize_tags(tags)
    rendered = frontmatter.dumps(post, sort_keys=False)
    return rendered if rendered.endswith("\n") else rendered + "\n"


def _split_front_matter(text: str) -> tuple[dict | None, str, str | None]:
    """Return (metadata, remainder, warning).

    metadata is None when there is no usable block; the remainder is then
    the full text. An empty block is an empty mapping.
    """
    if not _YAML.detect(text):
        return None, text, None
    try:
        fm, content = _YAML.split(text)
        metadata = _YAML.load(fm)
    except (yaml.YAMLError, ValueError) as e:
        return None, text, f"malformed front matter ({e.__class__.__name__})"
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        return None, text, f"front matter is not a mapping ({type(metadata).__name__})"
    return metadata, content.lstrip("\n"), None


def _split_title(text: str) -> tuple[str, str]:
    """Return (title, body) where title is the leading ``# heading`` or ""."""
    lines = text.split("\n")
    for idx, line in enumerate(lines):
        if not line.strip():
            continue
        match = TITLE_PATTERN.match(line)
        if match is None:
            break
        rest = "\n".join(lines[idx + 1 :])
        return match.group(1).strip(), rest.lstrip("\n")
    return "", text
