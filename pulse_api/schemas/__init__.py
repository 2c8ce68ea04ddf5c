"""Pydantic schemas for API request/response validation.

All schemas use CamelCase for JSON field names (via alias_generator).
"""

from .base import CamelModel, coerce_key
from .activities import ActivityRecord, PersonRef
from .usage import (
    RollupCounts,
    RecruiterRollup,
    RollupResult,
    QuotaUsage,
    QuotaRecord,
    QuotaUpdateRequest,
    UsageSummaryRow,
    PostingInsightRow,
    RecruiterChartRow,
    QuotaChartRow,
    PostingSeriesRow,
    SelfAnalyticsResponse,
    CompanyAnalyticsResponse,
    FeedMeta,
    ActivityFeedResponse,
)

__all__ = [
    "CamelModel",
    "coerce_key",
    "ActivityRecord",
    "PersonRef",
    "RollupCounts",
    "RecruiterRollup",
    "RollupResult",
    "QuotaUsage",
    "QuotaRecord",
    "QuotaUpdateRequest",
    "UsageSummaryRow",
    "PostingInsightRow",
    "RecruiterChartRow",
    "QuotaChartRow",
    "PostingSeriesRow",
    "SelfAnalyticsResponse",
    "CompanyAnalyticsResponse",
    "FeedMeta",
    "ActivityFeedResponse",
]
