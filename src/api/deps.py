from functools import lru_cache

from fastapi import Depends

from src.app_shell.config import Settings
from src.app_shell.context import ServiceContext
from src.components.publish import ArticleRepoPort, PublishDispatcher
from src.components.validation import PrePublishValidator
from src.rules.models import EditorialRules


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Services ---
@lru_cache
def get_context() -> ServiceContext:
    return ServiceContext.create(get_settings())


def get_rules(ctx: ServiceContext = Depends(get_context)) -> EditorialRules:
    return ctx.rules


def get_article_repo(ctx: ServiceContext = Depends(get_context)) -> ArticleRepoPort:
    return ctx.article_repo


def get_validator(ctx: ServiceContext = Depends(get_context)) -> PrePublishValidator:
    return ctx.validator


def get_dispatcher(ctx: ServiceContext = Depends(get_context)) -> PublishDispatcher:
    return ctx.dispatcher
