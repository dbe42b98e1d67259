"""
Publish component - Publish dispatch.

Validates articles and sends them to the publishing endpoint, one at a time
or in rate-limited bulk, then records the outcome and syncs the site catalog.
"""

from ._impl import PublishDispatcher, RateLimitedDispatchQueue, generate_slug
from .auto_publish import (
    cancel_auto_publish,
    is_due,
    mark_reviewed,
    run_auto_publish_cycle,
    schedule_auto_publish,
    select_due_articles,
)
from .catalog import (
    CatalogSync,
    build_catalog_entry,
    catalog_slug,
    classify_content_type,
    classify_degree_level,
    classify_subject_area,
)
from .component import run, run_bulk, run_publish, run_retry
from .models import (
    ENVIRONMENTS,
    AutoPublishDetail,
    AutoPublishReport,
    BulkDispatchResult,
    BulkPublishInput,
    PublishArticleInput,
    PublishConfig,
    PublishEligibility,
    PublishEndpoints,
    PublishOptions,
    PublishPayload,
    PublishResult,
    RetryPublishInput,
    TransportError,
)
from .ports import (
    ArticleRepoPort,
    CatalogRepoPort,
    ClockPort,
    DetachedTaskRunner,
    PublishEndpointPort,
    SleeperPort,
)

__all__ = [
    # Entry points
    "run",
    "run_publish",
    "run_retry",
    "run_bulk",
    "run_auto_publish_cycle",
    # Input models
    "PublishArticleInput",
    "RetryPublishInput",
    "BulkPublishInput",
    "PublishOptions",
    # Output models
    "PublishResult",
    "BulkDispatchResult",
    "PublishEligibility",
    "PublishPayload",
    "AutoPublishReport",
    "AutoPublishDetail",
    # Errors
    "TransportError",
    # Configuration
    "PublishConfig",
    "PublishEndpoints",
    "ENVIRONMENTS",
    # Ports
    "ArticleRepoPort",
    "CatalogRepoPort",
    "PublishEndpointPort",
    "ClockPort",
    "SleeperPort",
    "DetachedTaskRunner",
    # Service
    "PublishDispatcher",
    "RateLimitedDispatchQueue",
    "CatalogSync",
    "generate_slug",
    "build_catalog_entry",
    "catalog_slug",
    "classify_content_type",
    "classify_degree_level",
    "classify_subject_area",
    # Auto-publish scheduling
    "schedule_auto_publish",
    "cancel_auto_publish",
    "mark_reviewed",
    "is_due",
    "select_due_articles",
]
