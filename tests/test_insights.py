"""Tests for Usage Pulse view helpers."""

import pytest

from pulse_api.schemas.usage import PostingInsightRow, RecruiterRollup, UsageSummaryRow
from pulse_api.services.insights import (
    approximate_total,
    format_quota_type,
    merge_identities,
    posting_series,
    quota_chart_rows,
    recruiter_chart_rows,
)


@pytest.fixture
def summary():
    return [
        UsageSummaryRow.model_validate({
            "userId": "r1",
            "name": "Rita Recruiter",
            "email": "rita@example.com",
            "quotas": [
                {"quotaType": "job_postings", "used": 3, "limit": 50},
                {"quotaType": "contact_views", "used": 10, "limit": 500},
            ],
        }),
        UsageSummaryRow.model_validate({
            "userId": 7,
            "name": "Sam Sourcer",
            "quotas": [{"quotaType": "custom_feature", "used": 1, "limit": 2}],
        }),
    ]


@pytest.mark.parametrize("quota_type, label", [
    ("job_postings", "Job Postings"),
    ("resume_views", "Resume Views/Downloads"),
    ("resume_search", "Resume Views/Downloads"),
    ("messages", "Requirements Posted"),
    ("contact_views", "Profile Visits"),
    ("something_new", "something_new"),
])
def test_format_quota_type(quota_type, label):
    assert format_quota_type(quota_type) == label


def test_merge_identities_prefers_summary(summary):
    rows = [
        RecruiterRollup(user_id="r1", name="old name", email=None, accessed=2),
        RecruiterRollup(user_id="r9", name="Unlisted", email="r9@example.com", hired=1),
    ]
    merged = merge_identities(rows, summary)

    assert merged[0].name == "Rita Recruiter"
    assert merged[0].email == "rita@example.com"
    assert merged[0].accessed == 2
    assert merged[1] == rows[1]
    # Originals untouched
    assert rows[0].name == "old name"


def test_merge_identities_keeps_row_values_missing_from_summary(summary):
    rows = [RecruiterRollup(user_id="7", email="sam@example.com")]
    merged = merge_identities(rows, summary)
    assert merged[0].name == "Sam Sourcer"
    assert merged[0].email == "sam@example.com"


def test_recruiter_chart_rows_label_fallback():
    rows = [
        RecruiterRollup(user_id="r1", name="Rita", email="rita@example.com", accessed=1),
        RecruiterRollup(user_id="r2", name="Sam", hired=2),
        RecruiterRollup(user_id="r3", shortlisted=3),
    ]
    chart = recruiter_chart_rows(rows)
    assert [c.recruiter for c in chart] == ["rita@example.com", "Sam", "r3"]
    assert (chart[2].accessed, chart[2].hired, chart[2].shortlisted) == (0, 0, 3)


def test_quota_chart_rows(summary):
    rows = quota_chart_rows(summary)

    assert len(rows) == 3
    assert rows[0].recruiter == "rita@example.com"
    assert rows[0].quota_label == "rita@example.com - Job Postings"
    assert rows[1].quota_label == "rita@example.com - Profile Visits"
    assert (rows[1].used, rows[1].limit) == (10, 500)
    assert rows[2].recruiter == "Sam Sourcer"
    assert rows[2].quota_label == "Sam Sourcer - custom_feature"


def test_quota_chart_rows_serializes_camel_case(summary):
    payload = quota_chart_rows(summary)[0].model_dump(by_alias=True)
    assert set(payload) == {"recruiter", "quotaType", "used", "limit", "quotaLabel"}


def test_posting_series_sums_per_recruiter(summary):
    insights = [
        PostingInsightRow.model_validate({"recruiterId": "r1", "totalJobs": 2, "totalApplications": 10}),
        PostingInsightRow.model_validate({"recruiterId": "r2", "recruiterEmail": "r2@example.com", "totalJobs": 1}),
        PostingInsightRow.model_validate({"recruiterId": "r1", "totalJobs": 1, "totalApplications": 5}),
        PostingInsightRow.model_validate({"recruiterId": "r3"}),
    ]
    series = posting_series(insights, summary)

    assert [s.recruiter_id for s in series] == ["r1", "r2", "r3"]
    assert (series[0].recruiter_email, series[0].jobs, series[0].applications) == ("rita@example.com", 3, 15)
    assert series[1].recruiter_email == "r2@example.com"
    assert series[2].recruiter_email == "r3"


def test_posting_series_empty():
    assert posting_series([]) == []


@pytest.mark.parametrize("page, limit, returned, expected", [
    (1, 20, 0, 0),
    (1, 20, 7, 7),
    (3, 20, 5, 45),
    (1, 20, 20, 21),
    (2, 20, 20, 41),
])
def test_approximate_total(page, limit, returned, expected):
    assert approximate_total(page, limit, returned) == expected
