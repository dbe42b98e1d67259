"""
Publishing API Routes.

Validate, publish, retry and bulk-publish articles from the record store.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.deps import get_article_repo, get_dispatcher, get_validator
from src.api.schemas import (
    BulkPublishRequest,
    BulkPublishResponse,
    PublishRequest,
    PublishResponse,
    VerdictResponse,
)
from src.components.publish import ArticleRepoPort, PublishDispatcher, PublishOptions
from src.components.validation import PrePublishValidator, summarize
from src.domain.entities import Article

router = APIRouter()


def _load_article(repo: ArticleRepoPort, article_id: UUID) -> Article:
    article = repo.get_by_id(article_id)
    if article is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Article not found")
    return article


@router.post("/{article_id}/validate", response_model=VerdictResponse)
def validate_article(
    article_id: UUID,
    repo: ArticleRepoPort = Depends(get_article_repo),
    validator: PrePublishValidator = Depends(get_validator),
    dispatcher: PublishDispatcher = Depends(get_dispatcher),
) -> VerdictResponse:
    """Run pre-publish validation without dispatching."""
    article = _load_article(repo, article_id)
    verdict = validator.validate_with_registry(article, dispatcher.policy_for(PublishOptions()))
    return VerdictResponse.build(article.id, verdict, summarize(verdict))


@router.post("/{article_id}/publish", response_model=PublishResponse)
def publish_article(
    article_id: UUID,
    request: PublishRequest | None = None,
    repo: ArticleRepoPort = Depends(get_article_repo),
    dispatcher: PublishDispatcher = Depends(get_dispatcher),
) -> PublishResponse:
    """Validate and dispatch one article."""
    article = _load_article(repo, article_id)
    options = (request or PublishRequest()).to_options()
    try:
        result = dispatcher.publish(article, options)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return PublishResponse.from_result(result)


@router.post("/{article_id}/retry", response_model=PublishResponse)
def retry_article(
    article_id: UUID,
    request: PublishRequest | None = None,
    repo: ArticleRepoPort = Depends(get_article_repo),
    dispatcher: PublishDispatcher = Depends(get_dispatcher),
) -> PublishResponse:
    """Re-read the article and run the publish flow again."""
    _load_article(repo, article_id)
    options = (request or PublishRequest()).to_options()
    try:
        result = dispatcher.retry(article_id, options)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return PublishResponse.from_result(result)


@router.post("/bulk-publish", response_model=BulkPublishResponse)
def bulk_publish(
    request: BulkPublishRequest,
    dispatcher: PublishDispatcher = Depends(get_dispatcher),
) -> BulkPublishResponse:
    """Publish several articles in order; one failure does not stop the rest."""
    options = PublishRequest(**request.model_dump(exclude={"article_ids"})).to_options()
    result = dispatcher.bulk_publish_ids(request.article_ids, options)
    return BulkPublishResponse.from_result(result)
