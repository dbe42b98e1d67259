import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any
from uuid import UUID

from src.adapters.clock import SystemClock
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.tasks import InlineTaskRunner
from src.app_shell.config import Settings, validate_startup
from src.app_shell.context import ServiceContext
from src.components.publish import (
    PublishOptions,
    cancel_auto_publish,
    mark_reviewed,
    run_auto_publish_cycle,
    schedule_auto_publish,
)
from src.components.validation import summarize

logger = logging.getLogger("cli")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def handle_init_db(settings: Settings, args: argparse.Namespace) -> int:
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, settings.migrations_dir)
    if args.pending:
        _print_json({"db_path": settings.db_path, "pending": migrator.pending_migrations()})
        return 0
    if args.rollback:
        try:
            rolled_back = migrator.rollback_last()
        except RuntimeError as e:
            logger.error("%s", e)
            return 1
        _print_json({"db_path": settings.db_path, "rolled_back": rolled_back})
        return 0
    applied = migrator.run_migrations()
    _print_json({"db_path": settings.db_path, "applied": applied})
    return 0


def handle_validate(ctx: ServiceContext, args: argparse.Namespace) -> int:
    article = ctx.article_repo.get_by_id(args.article_id)
    if article is None:
        logger.error("Article %s not found", args.article_id)
        return 1

    policy = ctx.dispatcher.policy_for(PublishOptions())
    verdict = ctx.validator.validate_with_registry(article, policy)
    _print_json(
        {
            "article_id": article.id,
            "can_publish": verdict.can_publish,
            "verdict": asdict(verdict),
            "summary": asdict(summarize(verdict)),
        }
    )
    return 0 if verdict.can_publish else 1


def _options(ctx: ServiceContext, args: argparse.Namespace) -> PublishOptions:
    return PublishOptions(
        status=getattr(args, "status", "draft"),
        environment=getattr(args, "env", None),
        validate_first=not getattr(args, "skip_validation", False),
    )


def handle_publish(ctx: ServiceContext, args: argparse.Namespace) -> int:
    result = ctx.dispatcher.publish_by_id(args.article_id, _options(ctx, args))
    _print_json(asdict(result))
    return 0 if result.success else 1


def handle_retry(ctx: ServiceContext, args: argparse.Namespace) -> int:
    result = ctx.dispatcher.retry(args.article_id, _options(ctx, args))
    _print_json(asdict(result))
    return 0 if result.success else 1


def handle_bulk(ctx: ServiceContext, args: argparse.Namespace) -> int:
    result = ctx.dispatcher.bulk_publish_ids(args.article_ids, _options(ctx, args))
    _print_json(asdict(result))
    return 0 if result.failed == 0 else 1


def handle_schedule(ctx: ServiceContext, args: argparse.Namespace) -> int:
    article = ctx.article_repo.get_by_id(args.article_id)
    if article is None:
        logger.error("Article %s not found", args.article_id)
        return 1

    now = SystemClock().now()
    if args.cancel:
        article = cancel_auto_publish(article, now)
    else:
        article = schedule_auto_publish(article, ctx.auto_publish, now)
    ctx.article_repo.save(article)
    _print_json(
        {
            "article_id": article.id,
            "status": article.status,
            "autopublish_deadline": article.autopublish_deadline,
        }
    )
    return 0


def handle_review(ctx: ServiceContext, args: argparse.Namespace) -> int:
    article = ctx.article_repo.get_by_id(args.article_id)
    if article is None:
        logger.error("Article %s not found", args.article_id)
        return 1

    article = ctx.article_repo.save(mark_reviewed(article, SystemClock().now()))
    _print_json(
        {
            "article_id": article.id,
            "human_reviewed": article.human_reviewed,
            "reviewed_at": article.reviewed_at,
        }
    )
    return 0


def handle_auto_publish(ctx: ServiceContext, args: argparse.Namespace) -> int:
    report = run_auto_publish_cycle(
        ctx.article_repo.list_by_status("ready_to_publish"),
        ctx.auto_publish,
        ctx.validator,
        ctx.dispatcher,
        SystemClock().now(),
        environment=getattr(args, "env", None),
    )
    _print_json(asdict(report))
    return 0 if report.articles_failed == 0 else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editorial-gate", description="Pre-publish validation and publish dispatch"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init-db
    init_parser = subparsers.add_parser("init-db", help="Create or migrate the SQLite database")
    init_mode = init_parser.add_mutually_exclusive_group()
    init_mode.add_argument(
        "--pending", action="store_true", help="List migrations not yet applied"
    )
    init_mode.add_argument(
        "--rollback", action="store_true", help="Undo the most recently applied migration"
    )

    # validate
    validate_parser = subparsers.add_parser("validate", help="Validate an article")
    validate_parser.add_argument("article_id", type=UUID)

    # publish / retry
    for name, help_text in (("publish", "Publish an article"), ("retry", "Retry a failed publish")):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("article_id", type=UUID)
        p.add_argument("--env", choices=["staging", "production"])
        p.add_argument("--status", choices=["draft", "publish"], default="draft")
        p.add_argument(
            "--skip-validation",
            action="store_true",
            help="Dispatch without running pre-publish validation",
        )

    # bulk
    bulk_parser = subparsers.add_parser("bulk", help="Publish several articles in order")
    bulk_parser.add_argument("article_ids", type=UUID, nargs="+")
    bulk_parser.add_argument("--env", choices=["staging", "production"])
    bulk_parser.add_argument("--status", choices=["draft", "publish"], default="draft")

    # schedule / review
    schedule_parser = subparsers.add_parser(
        "schedule", help="Queue an article for auto-publish after the review window"
    )
    schedule_parser.add_argument("article_id", type=UUID)
    schedule_parser.add_argument(
        "--cancel", action="store_true", help="Clear the auto-publish deadline"
    )
    review_parser = subparsers.add_parser(
        "review", help="Mark an article human-reviewed so it is never auto-published"
    )
    review_parser.add_argument("article_id", type=UUID)

    # auto-publish
    auto_parser = subparsers.add_parser("auto-publish", help="Run one auto-publish cycle")
    auto_parser.add_argument("--env", choices=["staging", "production"])

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    settings = Settings()
    if args.command == "init-db":
        return handle_init_db(settings, args)

    try:
        ctx = ServiceContext.create(settings, task_runner=InlineTaskRunner())
    except (FileNotFoundError, ValueError) as e:
        logger.error("Startup failed: %s", e)
        return 2
    validate_startup(settings, ctx.rules)

    handlers = {
        "validate": handle_validate,
        "publish": handle_publish,
        "retry": handle_retry,
        "bulk": handle_bulk,
        "schedule": handle_schedule,
        "review": handle_review,
        "auto-publish": handle_auto_publish,
    }
    return handlers[args.command](ctx, args)


if __name__ == "__main__":
    sys.exit(main())
