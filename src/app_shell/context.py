"""
Service wiring shared by the CLI and the HTTP API.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from src.adapters.clock import SystemClock
from src.adapters.http_endpoint import RequestsPublishEndpoint
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import (
    SQLiteArticleRepo,
    SQLiteCatalogRepo,
    SQLiteIdentifierRegistry,
)
from src.adapters.tasks import ThreadTaskRunner
from src.app_shell.config import Settings
from src.components.links import LinkPolicyConfig, LinkPolicyEvaluator
from src.components.publish import (
    CatalogSync,
    DetachedTaskRunner,
    PublishConfig,
    PublishDispatcher,
    PublishEndpointPort,
    RateLimitedDispatchQueue,
)
from src.components.risk import RiskAssessor, RiskConfig
from src.components.shortcodes import (
    IdentifierRegistryPort,
    ShortcodeConfig,
    ShortcodePolicyEvaluator,
)
from src.components.validation import (
    AutoPublishPolicy,
    PrePublishValidator,
    ValidationPolicy,
    ValidatorConfig,
)
from src.rules.loader import load_rules
from src.rules.models import EditorialRules


def build_validator(
    rules: EditorialRules, registry: IdentifierRegistryPort | None = None
) -> PrePublishValidator:
    links = LinkPolicyEvaluator(LinkPolicyConfig.from_rules(rules))
    return PrePublishValidator(
        config=ValidatorConfig.from_rules(rules),
        link_evaluator=links,
        shortcode_evaluator=ShortcodePolicyEvaluator(ShortcodeConfig.from_rules(rules), registry),
        risk_assessor=RiskAssessor(RiskConfig.from_rules(rules), link_evaluator=links),
    )


@dataclass
class ServiceContext:
    settings: Settings
    rules: EditorialRules
    article_repo: SQLiteArticleRepo
    catalog_repo: SQLiteCatalogRepo
    registry: SQLiteIdentifierRegistry
    validator: PrePublishValidator
    dispatcher: PublishDispatcher
    task_runner: DetachedTaskRunner
    auto_publish: AutoPublishPolicy

    @classmethod
    def create(
        cls,
        settings: Settings,
        rules: EditorialRules | None = None,
        endpoint: PublishEndpointPort | None = None,
        task_runner: DetachedTaskRunner | None = None,
    ) -> ServiceContext:
        rules = rules or load_rules(Path(settings.rules_path))
        Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
        SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

        clock = SystemClock()
        article_repo = SQLiteArticleRepo(settings.db_path)
        catalog_repo = SQLiteCatalogRepo(settings.db_path)
        registry = SQLiteIdentifierRegistry(settings.db_path)
        validator = build_validator(rules, registry)
        publish_config = PublishConfig.from_rules(rules)
        task_runner = task_runner or ThreadTaskRunner()

        dispatcher = PublishDispatcher(
            validator=validator,
            endpoint=endpoint or RequestsPublishEndpoint(settings.timeout_for(rules)),
            endpoints=settings.endpoints(),
            article_repo=article_repo,
            clock=clock,
            task_runner=task_runner,
            catalog=CatalogSync(catalog_repo, clock, publish_config.site_origin),
            config=publish_config,
            base_policy=ValidationPolicy.from_rules(rules),
            queue=RateLimitedDispatchQueue(publish_config.bulk_delay_seconds, clock),
        )
        return cls(
            settings=settings,
            rules=rules,
            article_repo=article_repo,
            catalog_repo=catalog_repo,
            registry=registry,
            validator=validator,
            dispatcher=dispatcher,
            task_runner=task_runner,
            auto_publish=AutoPublishPolicy.from_rules(rules),
        )
