"""Pydantic schemas for usage analytics endpoints."""

from typing import Any, Optional

from pydantic import Field, field_validator

from .activities import ActivityRecord
from .base import CamelModel, coerce_key


class RollupCounts(CamelModel):
    """Deduplicated business event counts."""

    accessed: int = 0
    hired: int = 0
    shortlisted: int = 0


class RecruiterRollup(RollupCounts):
    """Rollup counts for a single recruiter."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None


class RollupResult(CamelModel):
    """Output of the activity rollup."""

    per_actor: dict[str, RecruiterRollup] = {}
    aggregate: RollupCounts = Field(default_factory=RollupCounts)
    shortlisted_candidates: list[str] = []


# Backend payloads


class QuotaUsage(CamelModel):
    """Quota usage for one feature of one recruiter."""

    quota_type: str
    used: int = 0
    limit: int = 0
    reset_at: Optional[str] = None


class QuotaRecord(QuotaUsage):
    """A stored quota row as returned by the quota endpoints."""

    user_id: Optional[str] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> Any:
        return coerce_key(value)


class QuotaUpdateRequest(CamelModel):
    """New limit for one recruiter's quota."""

    user_id: str = Field(min_length=1)
    quota_type: str = Field(min_length=1)
    limit: int = Field(ge=0)
    reset_used: bool = False


class UsageSummaryRow(CamelModel):
    """Recruiter identity and quotas from the usage summary endpoint."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    quotas: list[QuotaUsage] = []

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> Any:
        return coerce_key(value) or value


class PostingInsightRow(CamelModel):
    """Jobs posted and applications received, per recruiter."""

    recruiter_id: str
    recruiter_email: Optional[str] = None
    total_jobs: int = 0
    total_applications: int = 0

    @field_validator("recruiter_id", mode="before")
    @classmethod
    def _coerce_recruiter_id(cls, value: Any) -> Any:
        return coerce_key(value) or value


# Chart rows


class RecruiterChartRow(CamelModel):
    """Bar chart row for the per-recruiter rollup."""

    recruiter: str
    accessed: int
    hired: int
    shortlisted: int


class QuotaChartRow(CamelModel):
    """Bar chart row for quota usage."""

    recruiter: Optional[str] = None
    quota_type: str
    used: int
    limit: int
    quota_label: str


class PostingSeriesRow(CamelModel):
    """Posting totals rolled up per recruiter."""

    recruiter_id: str
    recruiter_email: str
    jobs: int = 0
    applications: int = 0


# Responses


class SelfAnalyticsResponse(CamelModel):
    """Caller's own activity rollup."""

    counts: RollupCounts
    shortlisted_candidates: list[str] = []


class CompanyAnalyticsResponse(CamelModel):
    """Company-wide activity rollup with per-recruiter breakdown."""

    totals: RollupCounts
    per_recruiter: list[RecruiterRollup]
    chart: list[RecruiterChartRow]
    shortlisted_candidates: list[str] = []


class FeedMeta(CamelModel):
    """Paging metadata for the activity feed.

    The backend reports no total, so ``approximate_total`` is an estimate that
    only guarantees a next page exists when more rows may follow.
    """

    page: int
    limit: int
    approximate_total: int


class ActivityFeedResponse(CamelModel):
    """One page of the activity feed."""

    data: list[ActivityRecord]
    meta: FeedMeta
