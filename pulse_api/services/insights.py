"""Usage Pulse view helpers: identity joins, quota and posting charts."""

from typing import Iterable

from pulse_api.schemas.usage import (
    PostingInsightRow,
    PostingSeriesRow,
    QuotaChartRow,
    RecruiterChartRow,
    RecruiterRollup,
    UsageSummaryRow,
)


QUOTA_TYPE_LABELS = {
    "job_postings": "Job Postings",
    "resume_views": "Resume Views/Downloads",
    "requirements_posted": "Requirements Posted",
    "profile_visits": "Profile Visits",
    # Legacy quota names
    "resume_search": "Resume Views/Downloads",
    "messages": "Requirements Posted",
    "contact_views": "Profile Visits",
}


def format_quota_type(quota_type: str) -> str:
    """Human-readable label for a quota type; unknown types pass through."""
    return QUOTA_TYPE_LABELS.get(quota_type, quota_type)


def merge_identities(
    rows: Iterable[RecruiterRollup],
    summary: Iterable[UsageSummaryRow],
) -> list[RecruiterRollup]:
    """
    Overlay recruiter name/email from the usage summary onto rollup rows.

    The summary is the authoritative identity source; rows for recruiters
    missing from it keep whatever the activity log carried.
    """
    index = {row.user_id: row for row in summary}
    merged = []
    for row in rows:
        identity = index.get(row.user_id)
        if identity is None:
            merged.append(row)
            continue
        merged.append(row.model_copy(update={
            "name": identity.name if identity.name is not None else row.name,
            "email": identity.email if identity.email is not None else row.email,
        }))
    return merged


def recruiter_chart_rows(rows: Iterable[RecruiterRollup]) -> list[RecruiterChartRow]:
    """Chart rows labelled by recruiter email, name or id."""
    return [
        RecruiterChartRow(
            recruiter=r.email or r.name or r.user_id,
            accessed=r.accessed,
            hired=r.hired,
            shortlisted=r.shortlisted,
        )
        for r in rows
    ]


def quota_chart_rows(summary: Iterable[UsageSummaryRow]) -> list[QuotaChartRow]:
    """Flatten each recruiter's quotas into one chart row per feature."""
    rows = []
    for recruiter in summary:
        label = recruiter.email or recruiter.name or recruiter.user_id
        for quota in recruiter.quotas:
            rows.append(QuotaChartRow(
                recruiter=recruiter.email or recruiter.name,
                quota_type=quota.quota_type,
                used=quota.used,
                limit=quota.limit,
                quota_label=f"{label} - {format_quota_type(quota.quota_type)}",
            ))
    return rows


def posting_series(
    insights: Iterable[PostingInsightRow],
    summary: Iterable[UsageSummaryRow] = (),
) -> list[PostingSeriesRow]:
    """Sum jobs and applications per recruiter, preserving first-seen order."""
    emails = {row.user_id: row.email for row in summary}
    totals: dict[str, PostingSeriesRow] = {}

    for row in insights:
        entry = totals.get(row.recruiter_id)
        if entry is None:
            entry = totals[row.recruiter_id] = PostingSeriesRow(
                recruiter_id=row.recruiter_id,
                recruiter_email=emails.get(row.recruiter_id) or row.recruiter_email or row.recruiter_id,
            )
        entry.jobs += row.total_jobs or 0
        entry.applications += row.total_applications or 0

    return list(totals.values())


def approximate_total(page: int, limit: int, returned: int) -> int:
    """
    Estimate the feed size when the backend reports no total.

    A short page is the last one, so the total is exact. A full page means
    more rows may follow; report one past the current page so pagers offer a
    next page.
    """
    if returned < limit:
        return (page - 1) * limit + returned
    return page * limit + 1
