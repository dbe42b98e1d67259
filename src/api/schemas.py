from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from src.components.publish import BulkDispatchResult, PublishOptions, PublishResult
from src.components.validation import ValidationIssue, ValidationSummary, ValidationVerdict

# --- Shared Enums/Types ---
Environment = Literal["staging", "production"]
TargetStatus = Literal["draft", "publish"]


# --- Verdicts ---
class IssueModel(BaseModel):
    kind: str
    message: str
    url: str | None = None

    @classmethod
    def from_issue(cls, issue: ValidationIssue) -> "IssueModel":
        return cls(kind=issue.kind, message=issue.message, url=issue.url)


class CheckModel(BaseModel):
    passed: bool
    message: str


class SummaryModel(BaseModel):
    passed_checks: int
    total_checks: int
    percentage: int
    status: str
    status_message: str


class VerdictResponse(BaseModel):
    article_id: UUID
    can_publish: bool
    risk_level: str
    quality_score: int
    blocking_issues: list[IssueModel]
    warnings: list[IssueModel]
    checks: dict[str, CheckModel]
    summary: SummaryModel

    @classmethod
    def build(
        cls, article_id: UUID, verdict: ValidationVerdict, summary: ValidationSummary
    ) -> "VerdictResponse":
        return cls(
            article_id=article_id,
            can_publish=verdict.can_publish,
            risk_level=verdict.risk_level.value,
            quality_score=verdict.quality_score,
            blocking_issues=[IssueModel.from_issue(i) for i in verdict.blocking_issues],
            warnings=[IssueModel.from_issue(i) for i in verdict.warnings],
            checks={
                name: CheckModel(passed=c.passed, message=c.message)
                for name, c in verdict.checks.items()
            },
            summary=SummaryModel(
                passed_checks=summary.passed_checks,
                total_checks=summary.total_checks,
                percentage=summary.percentage,
                status=summary.status,
                status_message=summary.status_message,
            ),
        )


# --- Publishing ---
class PublishRequest(BaseModel):
    status: TargetStatus = "draft"
    # Unset fields fall back to the editorial rules file
    environment: Environment | None = None
    validate_first: bool = True
    require_min_quality_score: int | None = Field(default=None, ge=0, le=100)
    block_high_risk: bool | None = None
    require_monetization: bool | None = None
    block_unknown_shortcodes: bool | None = None
    use_registry: bool = True

    def to_options(self) -> PublishOptions:
        return PublishOptions(**self.model_dump())


class BulkPublishRequest(PublishRequest):
    article_ids: list[UUID] = Field(..., min_length=1)


class PublishResponse(BaseModel):
    success: bool
    article_id: UUID
    state: str
    environment: str
    error: str | None = None
    blocking_issues: list[IssueModel] = []
    external_response: dict[str, Any] | None = None
    post_id: str | None = None
    published_url: str | None = None
    published_at: datetime | None = None

    @classmethod
    def from_result(cls, result: PublishResult) -> "PublishResponse":
        return cls(
            success=result.success,
            article_id=result.article_id,
            state=result.state.value,
            environment=result.environment,
            error=result.error,
            blocking_issues=[IssueModel.from_issue(i) for i in result.blocking_issues],
            external_response=dict(result.external_response)
            if result.external_response is not None
            else None,
            post_id=result.post_id,
            published_url=result.published_url,
            published_at=result.published_at,
        )


class BulkPublishResponse(BaseModel):
    total: int
    successful: int
    failed: int
    results: list[PublishResponse]

    @classmethod
    def from_result(cls, result: BulkDispatchResult) -> "BulkPublishResponse":
        return cls(
            total=result.total,
            successful=result.successful,
            failed=result.failed,
            results=[PublishResponse.from_result(r) for r in result.results],
        )
