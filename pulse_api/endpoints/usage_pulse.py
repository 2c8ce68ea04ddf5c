"""Usage Pulse endpoints for company admins."""

import asyncio
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query

from pulse_api.integrations.backend import BackendClient, get_backend_client
from pulse_api.middleware.error_handler import UpstreamError
from pulse_api.schemas.usage import (
    ActivityFeedResponse,
    FeedMeta,
    PostingSeriesRow,
    QuotaChartRow,
    QuotaRecord,
    QuotaUpdateRequest,
)
from pulse_api.services.insights import approximate_total, posting_series, quota_chart_rows
from pulse_api.services.rbac import require_company_admin

logger = structlog.get_logger()
router = APIRouter()


@router.get("/quotas", response_model=list[QuotaChartRow])
async def quota_usage(
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """Quota usage per recruiter and feature."""
    summary = await backend.get_usage_summary()
    return quota_chart_rows(summary)


@router.get("/posting-insights", response_model=list[PostingSeriesRow])
async def posting_insights(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """Jobs posted and applications received, rolled up per recruiter."""
    summary, insights = await asyncio.gather(
        backend.get_usage_summary(),
        backend.get_posting_insights(date_from=date_from, date_to=date_to),
    )
    return posting_series(insights, summary)


@router.get("/search-insights")
async def search_insights(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
) -> list[dict[str, Any]]:
    """Top candidate searches run by the company's recruiters."""
    return await backend.get_search_insights(date_from=date_from, date_to=date_to, limit=limit)


@router.get("/recruiter-performance")
async def recruiter_performance(
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
) -> list[dict[str, Any]]:
    """Recruiter leaderboard."""
    return await backend.get_recruiter_performance(date_from=date_from, date_to=date_to, limit=limit)


@router.get("/activities", response_model=ActivityFeedResponse)
async def activity_feed(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    recruiter_id: Optional[str] = Query(None, alias="recruiterId"),
    activity_type: Optional[str] = Query(None, alias="activityType"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """Paged activity feed with recruiter, type and date filters."""
    records = await backend.get_usage_activities(
        user_id=recruiter_id,
        activity_type=activity_type,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=(page - 1) * limit,
    )

    return ActivityFeedResponse(
        data=records,
        meta=FeedMeta(
            page=page,
            limit=limit,
            approximate_total=approximate_total(page, limit, len(records)),
        ),
    )


@router.get("/quotas/{user_id}", response_model=list[QuotaRecord])
async def recruiter_quotas(
    user_id: str,
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """Stored quota rows for one recruiter."""
    return await backend.get_quotas(user_id)


@router.put("/quotas", response_model=QuotaRecord)
async def update_quota(
    body: QuotaUpdateRequest,
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """
    Set a recruiter's limit for one quota type.

    With ``resetUsed`` the recruiter's usage counter for that quota starts
    again from zero.
    """
    quota = await backend.update_quota(
        user_id=body.user_id,
        quota_type=body.quota_type,
        limit=body.limit,
        reset_used=body.reset_used,
    )
    if quota is None:
        raise UpstreamError("/usage/quotas")

    logger.info(
        "Quota updated",
        recruiter_id=body.user_id,
        quota_type=body.quota_type,
        limit=body.limit,
        reset_used=body.reset_used,
    )
    return quota
