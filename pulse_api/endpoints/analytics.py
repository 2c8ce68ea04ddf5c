"""Employer analytics endpoints: candidates accessed, hired and shortlisted."""

import asyncio

import structlog
from fastapi import APIRouter, Depends

from pulse_api.config.settings import settings
from pulse_api.integrations.backend import BackendClient, get_backend_client
from pulse_api.schemas.usage import CompanyAnalyticsResponse, SelfAnalyticsResponse
from pulse_api.services.insights import merge_identities, recruiter_chart_rows
from pulse_api.services.rbac import require_company_admin, require_user_type
from pulse_api.services.rollup import RollupScope, compute_rollup
from pulse_api.services.token import get_company_id, get_user_id

logger = structlog.get_logger()
router = APIRouter()


@router.get("/self", response_model=SelfAnalyticsResponse)
async def my_analytics(
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_user_type(["employer", "admin"])),
):
    """Rollup of the caller's own activity."""
    user_id = get_user_id(user)
    records = await backend.get_usage_activities(
        user_id=user_id,
        limit=settings.SELF_ACTIVITY_LIMIT,
    )

    result = compute_rollup(records, RollupScope.SELF, actor_id=user_id)

    logger.info(
        "Self analytics computed",
        user=user_id,
        records=len(records),
        accessed=result.aggregate.accessed,
        hired=result.aggregate.hired,
        shortlisted=result.aggregate.shortlisted,
    )

    return SelfAnalyticsResponse(
        counts=result.aggregate,
        shortlisted_candidates=result.shortlisted_candidates,
    )


@router.get("/company", response_model=CompanyAnalyticsResponse)
async def company_analytics(
    backend: BackendClient = Depends(get_backend_client),
    user: dict = Depends(require_company_admin),
):
    """
    Company-wide rollup with a per-recruiter breakdown.

    Totals count each candidate/application once across the company, so they
    can be lower than the sum of the per-recruiter rows.
    """
    summary, records = await asyncio.gather(
        backend.get_usage_summary(),
        backend.get_usage_activities(limit=settings.COMPANY_ACTIVITY_LIMIT),
    )

    result = compute_rollup(records, RollupScope.COMPANY)
    rows = merge_identities(result.per_actor.values(), summary)

    logger.info(
        "Company analytics computed",
        company=get_company_id(user),
        records=len(records),
        recruiters=len(rows),
    )

    return CompanyAnalyticsResponse(
        totals=result.aggregate,
        per_recruiter=rows,
        chart=recruiter_chart_rows(rows),
        shortlisted_candidates=result.shortlisted_candidates,
    )
