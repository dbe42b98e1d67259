"""Plain-text helpers shared by the validators and the dispatcher."""

import re

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_H2_RE = re.compile(r"<h2", re.IGNORECASE)


def strip_html(html: str | None) -> str:
    """Remove tags and collapse whitespace."""
    if not html:
        return ""
    return _WS_RE.sub(" ", _TAG_RE.sub(" ", html)).strip()


def count_words(html: str | None) -> int:
    text = strip_html(html)
    if not text:
        return 0
    return len(text.split(" "))


def count_h2(html: str | None) -> int:
    if not html:
        return 0
    return len(_H2_RE.findall(html))


def slugify(value: str | None, max_length: int | None = None) -> str:
    """
    Lowercase, drop punctuation, join words with single hyphens.
    """
    if not value:
        return ""
    slug = re.sub(r"[^a-z0-9\s-]", "", value.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    if max_length is not None:
        slug = slug[:max_length]
    return slug


def generate_excerpt(html: str | None, max_length: int = 160) -> str:
    """Plain-text excerpt cut at a word boundary."""
    text = strip_html(html)
    if len(text) <= max_length:
        return text

    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated + "..."
