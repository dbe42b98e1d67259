"""
Publish component - Publish dispatch.

Shell Layer - routes input models to the dispatcher.
"""

from __future__ import annotations

from ._impl import PublishDispatcher
from .models import (
    BulkDispatchResult,
    BulkPublishInput,
    PublishArticleInput,
    PublishResult,
    RetryPublishInput,
)

PublishInput = PublishArticleInput | RetryPublishInput | BulkPublishInput
PublishOutput = PublishResult | BulkDispatchResult


def run_publish(input_data: PublishArticleInput, dispatcher: PublishDispatcher) -> PublishResult:
    """Publish the persisted article."""
    return dispatcher.publish_by_id(input_data.article_id, input_data.options)


def run_retry(input_data: RetryPublishInput, dispatcher: PublishDispatcher) -> PublishResult:
    """Re-read and publish an article whose last attempt failed."""
    return dispatcher.retry(input_data.article_id, input_data.options)


def run_bulk(input_data: BulkPublishInput, dispatcher: PublishDispatcher) -> BulkDispatchResult:
    """Publish several articles in order."""
    return dispatcher.bulk_publish_ids(input_data.article_ids, input_data.options)


def run(input_data: PublishInput, dispatcher: PublishDispatcher) -> PublishOutput:
    """Main dispatcher - routes to appropriate handler based on input type."""
    if isinstance(input_data, PublishArticleInput):
        return run_publish(input_data, dispatcher)
    elif isinstance(input_data, RetryPublishInput):
        return run_retry(input_data, dispatcher)
    elif isinstance(input_data, BulkPublishInput):
        return run_bulk(input_data, dispatcher)
    else:
        raise TypeError(f"Unknown input type: {type(input_data)}")
