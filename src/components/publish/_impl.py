"""
Publish dispatch.

Key behaviors:
- Validation runs first unless the caller explicitly skips it
- A rejected article never reaches the network
- Exactly one POST per attempt; failures are reported, never retried here
- Record updates and catalog sync after a successful POST cannot turn it into a failure
- Bulk dispatch is sequential with a fixed delay between items
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import TypeVar
from uuid import UUID

from src.components.validation import PrePublishValidator, ValidationPolicy
from src.domain.entities import Article, RiskLevel
from src.domain.state import PublishState, transition
from src.domain.text import count_words, generate_excerpt, slugify

from .catalog import CatalogSync
from .models import (
    BulkDispatchResult,
    PublishConfig,
    PublishEligibility,
    PublishEndpoints,
    PublishOptions,
    PublishPayload,
    PublishResult,
    TransportError,
)
from .ports import (
    ArticleRepoPort,
    ClockPort,
    DetachedTaskRunner,
    PublishEndpointPort,
    SleeperPort,
)

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 100

T = TypeVar("T")
R = TypeVar("R")


def generate_slug(title: str | None) -> str:
    return slugify(title, max_length=SLUG_MAX_LENGTH)


class _TimeSleeper:
    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class RateLimitedDispatchQueue:
    """
    Runs a handler over items one at a time with a fixed pause between calls.

    An exception from one item is logged and converted by on_error so the
    remaining items still run. Results keep the input order.
    """

    def __init__(self, delay_seconds: float = 0.5, sleeper: SleeperPort | None = None) -> None:
        if delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self._delay = delay_seconds
        self._sleeper = sleeper or _TimeSleeper()

    @property
    def delay_seconds(self) -> float:
        return self._delay

    def process(
        self,
        items: Sequence[T],
        handler: Callable[[T], R],
        on_error: Callable[[T, Exception], R],
    ) -> list[R]:
        results: list[R] = []
        for index, item in enumerate(items):
            if index > 0 and self._delay > 0:
                self._sleeper.sleep(self._delay)
            try:
                results.append(handler(item))
            except Exception as e:
                logger.exception("Dispatch of item %d failed unexpectedly", index)
                results.append(on_error(item, e))
        return results


class PublishDispatcher:
    """Validates and sends articles to the publishing endpoint."""

    def __init__(
        self,
        validator: PrePublishValidator,
        endpoint: PublishEndpointPort,
        endpoints: PublishEndpoints,
        article_repo: ArticleRepoPort,
        clock: ClockPort,
        task_runner: DetachedTaskRunner,
        catalog: CatalogSync | None = None,
        config: PublishConfig | None = None,
        base_policy: ValidationPolicy | None = None,
        queue: RateLimitedDispatchQueue | None = None,
    ) -> None:
        self._validator = validator
        self._endpoint = endpoint
        self._endpoints = endpoints
        self._articles = article_repo
        self._clock = clock
        self._tasks = task_runner
        self._catalog = catalog
        self._config = config or PublishConfig.default()
        self._base_policy = base_policy or ValidationPolicy()
        self._queue = queue or RateLimitedDispatchQueue(self._config.bulk_delay_seconds)

    # --- Single article ---

    def publish(self, article: Article, options: PublishOptions | None = None) -> PublishResult:
        options = options or PublishOptions()
        environment = self.environment_for(options)
        # Unknown environments fail before any work is done
        endpoint_url = self._endpoints.url_for(environment)

        state = PublishState.UNVALIDATED
        verdict = None

        if options.validate_first:
            state = self._advance(article.id, state, PublishState.VALIDATING)
            policy = self.policy_for(options)
            if options.use_registry:
                verdict = self._validator.validate_with_registry(article, policy)
            else:
                verdict = self._validator.validate(article, policy)

            if not verdict.can_publish:
                state = self._advance(article.id, state, PublishState.REJECTED)
                logger.info(
                    "Article %s rejected with %d blocking issue(s)",
                    article.id,
                    len(verdict.blocking_issues),
                )
                return PublishResult(
                    success=False,
                    article_id=article.id,
                    state=state,
                    environment=environment,
                    error="Validation failed",
                    blocking_issues=verdict.blocking_issues,
                    verdict=verdict,
                )
            state = self._advance(article.id, state, PublishState.VALIDATED)

        state = self._advance(article.id, state, PublishState.DISPATCHING)
        payload = self.build_payload(article, options.status, environment)
        logger.info("Publishing article %s to %s: %s", article.id, environment, endpoint_url)

        try:
            response = self._endpoint.post(endpoint_url, payload.to_dict())
        except TransportError as e:
            state = self._advance(article.id, state, PublishState.DISPATCH_FAILED)
            logger.warning("Publish of article %s failed: %s", article.id, e)
            return PublishResult(
                success=False,
                article_id=article.id,
                state=state,
                environment=environment,
                error=str(e),
                verdict=verdict,
            )

        state = self._advance(article.id, state, PublishState.PUBLISHED)
        published_at = self._clock.now()
        result = PublishResult(
            success=True,
            article_id=article.id,
            state=state,
            environment=environment,
            external_response=response,
            verdict=verdict,
            published_at=published_at,
        )

        if options.update_record:
            self._record_published(article, result)
            if result.published_url:
                self._submit_catalog_sync(article, result.published_url)

        return result

    def publish_by_id(
        self, article_id: UUID, options: PublishOptions | None = None
    ) -> PublishResult:
        """Load the persisted article and run the publish flow on it."""
        options = options or PublishOptions()
        article = self._articles.get_by_id(article_id)
        if article is None:
            return PublishResult(
                success=False,
                article_id=article_id,
                state=PublishState.UNVALIDATED,
                environment=self.environment_for(options),
                error=f"Failed to fetch article: {article_id} not found",
            )
        return self.publish(article, options)

    def retry(self, article_id: UUID, options: PublishOptions | None = None) -> PublishResult:
        """
        Publish again from the persisted record.

        The record is re-read so that a retry is judged on current state,
        not on whatever the caller saw when the first attempt failed.
        """
        logger.info("Retrying publish of article %s", article_id)
        return self.publish_by_id(article_id, options)

    # --- Bulk ---

    def bulk_publish(
        self, articles: Sequence[Article], options: PublishOptions | None = None
    ) -> BulkDispatchResult:
        options = options or PublishOptions()
        results = self._queue.process(
            articles,
            lambda article: self.publish(article, options),
            lambda article, e: self._unexpected_failure(article.id, options, e),
        )
        return _tally(results)

    def bulk_publish_ids(
        self, article_ids: Sequence[UUID], options: PublishOptions | None = None
    ) -> BulkDispatchResult:
        options = options or PublishOptions()
        results = self._queue.process(
            article_ids,
            lambda article_id: self.publish_by_id(article_id, options),
            lambda article_id, e: self._unexpected_failure(article_id, options, e),
        )
        return _tally(results)

    # --- Helpers ---

    def environment_for(self, options: PublishOptions) -> str:
        return options.environment or self._config.default_environment

    def policy_for(self, options: PublishOptions) -> ValidationPolicy:
        """Configured validation policy with the caller's explicit overrides applied."""
        overrides = {
            "min_quality_score": options.require_min_quality_score,
            "block_high_risk": options.block_high_risk,
            "require_monetization": options.require_monetization,
            "block_unknown_shortcodes": options.block_unknown_shortcodes,
        }
        return replace(
            self._base_policy,
            **{name: value for name, value in overrides.items() if value is not None},
        )

    def check_publish_eligibility(self, article: Article) -> PublishEligibility:
        verdict = self._validator.validate(article, self._base_policy)
        return PublishEligibility(
            eligible=verdict.can_publish,
            risk_level=verdict.risk_level.value,
            quality_score=verdict.quality_score,
            blocking_issues=verdict.blocking_issues,
            warnings=verdict.warnings,
            checks=verdict.checks,
        )

    def build_payload(
        self,
        article: Article,
        status: str = "draft",
        environment: str = "staging",
    ) -> PublishPayload:
        excerpt = article.excerpt or generate_excerpt(
            article.content, self._config.excerpt_length
        )
        word_count = (
            article.word_count
            if article.word_count is not None
            else count_words(article.content)
        )
        return PublishPayload(
            article_id=str(article.id),
            title=article.title,
            content=article.content,
            excerpt=excerpt,
            author=article.author,
            author_display_name=self._config.display_name(article.author),
            meta_title=article.meta_title or article.title,
            meta_description=article.meta_description or excerpt,
            focus_keyword=article.focus_keyword or "",
            slug=article.slug or generate_slug(article.title),
            faqs=tuple({"question": f.question, "answer": f.answer} for f in article.faqs),
            status=status,
            environment=environment,
            published_at=self._clock.now().isoformat(),
            quality_score=article.quality_score,
            risk_level=(article.risk_level or RiskLevel.LOW).value,
            word_count=word_count,
        )

    def _advance(
        self, article_id: UUID, current: PublishState, new: PublishState
    ) -> PublishState:
        state = transition(current, new)
        logger.debug("Article %s: %s -> %s", article_id, current.value, new.value)
        return state

    def _record_published(self, article: Article, result: PublishResult) -> None:
        update: dict[str, object] = {
            "status": "published",
            "published_at": result.published_at,
            "updated_at": result.published_at,
        }
        if result.post_id:
            update["wordpress_post_id"] = result.post_id
        if result.published_url:
            update["published_url"] = result.published_url

        try:
            self._articles.save(article.model_copy(update=update))
        except Exception:
            # The endpoint already accepted the article
            logger.exception("Failed to update article %s after publish", article.id)

    def _submit_catalog_sync(self, article: Article, published_url: str) -> None:
        catalog = self._catalog
        if catalog is None:
            return
        self._tasks.submit(
            f"catalog-sync:{article.id}",
            lambda: catalog.sync(article, published_url),
        )

    def _unexpected_failure(
        self, article_id: UUID, options: PublishOptions, error: Exception
    ) -> PublishResult:
        return PublishResult(
            success=False,
            article_id=article_id,
            state=PublishState.UNVALIDATED,
            environment=self.environment_for(options),
            error=str(error),
        )


def _tally(results: list[PublishResult]) -> BulkDispatchResult:
    successful = sum(1 for r in results if r.success)
    return BulkDispatchResult(
        total=len(results),
        successful=successful,
        failed=len(results) - successful,
        results=tuple(results),
    )
