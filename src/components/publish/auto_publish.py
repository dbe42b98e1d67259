"""
Auto-publish cycle.

An article enters the auto-publish window when it is scheduled: it becomes
ready_to_publish with a deadline days_until_auto_publish days out. Once the
deadline passes, a cycle publishes it unless a human reviewed it first or
it exceeds the configured risk and quality limits.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta

from src.components.validation import AutoPublishPolicy, PrePublishValidator, can_auto_publish
from src.domain.entities import Article, PublishEnvironment

from ._impl import PublishDispatcher
from .models import AutoPublishDetail, AutoPublishReport, PublishOptions

logger = logging.getLogger(__name__)


def schedule_auto_publish(
    article: Article, settings: AutoPublishPolicy, now: datetime
) -> Article:
    """
    Mark an article ready_to_publish with its auto-publish deadline set.

    A non-positive day count leaves the deadline unset, so the article
    waits for a human.
    """
    days = settings.days_until_auto_publish
    deadline = now + timedelta(days=days) if days > 0 else None
    return article.model_copy(
        update={
            "status": "ready_to_publish",
            "autopublish_deadline": deadline,
            "human_reviewed": False,
            "reviewed_at": None,
            "updated_at": now,
        }
    )


def cancel_auto_publish(article: Article, now: datetime) -> Article:
    return article.model_copy(update={"autopublish_deadline": None, "updated_at": now})


def mark_reviewed(article: Article, now: datetime) -> Article:
    """Record a human review. Reviewed articles are never auto-published."""
    return article.model_copy(
        update={"human_reviewed": True, "reviewed_at": now, "updated_at": now}
    )


def is_due(article: Article, now: datetime) -> bool:
    return (
        article.status == "ready_to_publish"
        and not article.human_reviewed
        and article.autopublish_deadline is not None
        and article.autopublish_deadline <= now
    )


def select_due_articles(articles: Sequence[Article], now: datetime) -> list[Article]:
    """Articles past their deadline and never reviewed, earliest deadline first."""
    due = [article for article in articles if is_due(article, now)]
    return sorted(due, key=lambda article: article.autopublish_deadline or now)


def run_auto_publish_cycle(
    articles: Sequence[Article],
    settings: AutoPublishPolicy,
    validator: PrePublishValidator,
    dispatcher: PublishDispatcher,
    now: datetime,
    environment: PublishEnvironment | None = None,
) -> AutoPublishReport:
    """
    Check and publish up to settings.max_articles_per_run due articles.

    Candidates that are not due at `now` are ignored. Eligible articles are
    sent live with validation skipped, since the eligibility check has just
    validated them.
    """
    if not settings.enabled:
        return AutoPublishReport(
            details=(AutoPublishDetail(type="info", message="Auto-publish is disabled"),)
        )

    articles = select_due_articles(articles, now)
    if not articles:
        return AutoPublishReport(
            details=(
                AutoPublishDetail(type="info", message="No articles eligible for auto-publish"),
            )
        )

    options = PublishOptions(
        status="publish",
        environment=environment,
        validate_first=False,
        update_record=True,
    )
    published = failed = skipped = 0
    details: list[AutoPublishDetail] = []

    for article in articles[: settings.max_articles_per_run]:
        eligibility = can_auto_publish(validator, article, settings)
        if not eligibility.eligible:
            skipped += 1
            details.append(
                AutoPublishDetail(
                    type="skipped",
                    article_id=article.id,
                    title=article.title,
                    reasons=(eligibility.reason,) if eligibility.reason else (),
                )
            )
            continue

        try:
            result = dispatcher.publish(article, options)
        except Exception as e:
            logger.exception("Auto-publish of article %s raised", article.id)
            failed += 1
            details.append(
                AutoPublishDetail(
                    type="error", article_id=article.id, title=article.title, message=str(e)
                )
            )
            continue

        if result.success:
            published += 1
            details.append(
                AutoPublishDetail(type="published", article_id=article.id, title=article.title)
            )
        else:
            failed += 1
            details.append(
                AutoPublishDetail(
                    type="failed",
                    article_id=article.id,
                    title=article.title,
                    message=result.error,
                )
            )

    logger.info(
        "Auto-publish cycle: checked=%d published=%d failed=%d skipped=%d",
        len(articles),
        published,
        failed,
        skipped,
    )
    return AutoPublishReport(
        articles_checked=len(articles),
        articles_published=published,
        articles_failed=failed,
        articles_skipped=skipped,
        details=tuple(details),
    )
