"""
Site catalog sync for published articles.

Every article that comes back from the endpoint with a public URL is recorded
in the site catalog so later drafts can link to it. Classification is by title
keywords only.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from urllib.parse import urlsplit

from src.domain.entities import Article, CatalogEntry, ContentKind
from src.domain.text import count_words, strip_html

from .ports import CatalogRepoPort, ClockPort

logger = logging.getLogger(__name__)

# First match wins, checked in order
CONTENT_TYPE_KEYWORDS: tuple[tuple[ContentKind, tuple[str, ...]], ...] = (
    ("ranking", ("ranking", "best", "top", "cheapest")),
    ("career", ("career", "job", "salary")),
    ("how_to", ("how to",)),
)

DEGREE_LEVEL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("doctorate", ("doctorate", "phd", "dnp", "edd")),
    ("masters", ("master", "mba", "msn")),
    ("bachelors", ("bachelor", "bsn")),
    ("associate", ("associate",)),
)

SUBJECT_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("nursing", ("nursing", "nurse", "bsn", "msn", "dnp", "rn")),
    ("business", ("business", "mba", "management", "accounting", "finance", "marketing")),
    ("education", ("education", "teaching", "teacher", "med", "edd")),
    ("technology", ("technology", "computer", "cybersecurity", "data science", "software")),
    ("healthcare", ("healthcare", "health", "medical", "public health")),
    ("psychology", ("psychology", "counseling", "mental health")),
    ("social_work", ("social work", "msw")),
)

EXCERPT_FALLBACK_LENGTH = 300


def _starts_word(title: str, keyword: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}", title) is not None


def _whole_word(title: str, keyword: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", title) is not None


def classify_content_type(title: str | None) -> ContentKind:
    lowered = (title or "").lower()
    for content_type, keywords in CONTENT_TYPE_KEYWORDS:
        if any(_starts_word(lowered, kw) for kw in keywords):
            return content_type
    return "guide"


def classify_degree_level(title: str | None) -> str | None:
    lowered = (title or "").lower()
    for level, keywords in DEGREE_LEVEL_KEYWORDS:
        if any(_starts_word(lowered, kw) for kw in keywords):
            return level
    return None


def classify_subject_area(title: str | None) -> str | None:
    # Whole words only: "rn" and "med" would otherwise match inside other words
    lowered = (title or "").lower()
    for subject, keywords in SUBJECT_KEYWORDS:
        if any(_whole_word(lowered, kw) for kw in keywords):
            return subject
    return None


def catalog_slug(url: str, site_origin: str) -> str:
    """Path of the published URL relative to the site, without slashes at either end."""
    origin = site_origin.rstrip("/") + "/"
    if url.startswith(origin):
        return url[len(origin) :].rstrip("/")
    return urlsplit(url).path.strip("/")


def build_catalog_entry(
    article: Article,
    published_url: str,
    site_origin: str,
    now: datetime,
) -> CatalogEntry:
    text = strip_html(article.content)
    degree_level = classify_degree_level(article.title)
    subject_area = classify_subject_area(article.title)

    topics: list[str] = []
    if article.focus_keyword:
        topics.append(article.focus_keyword)
    if degree_level:
        topics.append(degree_level)
    if subject_area:
        topics.append(subject_area.replace("_", " "))

    return CatalogEntry(
        url=published_url,
        slug=catalog_slug(published_url, site_origin),
        title=article.title,
        meta_description=article.meta_description or article.excerpt,
        excerpt=article.excerpt or text[:EXCERPT_FALLBACK_LENGTH],
        content_html=article.content,
        content_text=text,
        word_count=count_words(article.content),
        content_type=classify_content_type(article.title),
        degree_level=degree_level,
        subject_area=subject_area,
        topics=topics or None,
        primary_topic=topics[0] if topics else None,
        author_name=article.author,
        published_at=now,
        scraped_at=now,
        needs_rewrite=False,
        times_linked_to=0,
    )


class CatalogSync:
    """Upserts published articles into the site catalog."""

    def __init__(self, repo: CatalogRepoPort, clock: ClockPort, site_origin: str) -> None:
        self._repo = repo
        self._clock = clock
        self._site_origin = site_origin

    def sync(self, article: Article, published_url: str) -> CatalogEntry:
        entry = build_catalog_entry(article, published_url, self._site_origin, self._clock.now())
        saved = self._repo.upsert(entry)
        logger.info("Article %s synced to site catalog: %s", article.id, published_url)
        return saved
