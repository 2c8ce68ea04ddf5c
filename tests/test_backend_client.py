"""Tests for the portal backend client."""

import asyncio
import json

import httpx
import pytest

from pulse_api.integrations.backend import BackendClient, BackendError


def test_activities_forward_filters_and_token(backend, activity):
    backend.set_data("/usage/activities", [activity("resume_view", candidateId="c1")])
    client = backend.client(token="abc")

    records = asyncio.run(client.get_usage_activities(
        user_id="r1",
        activity_type="resume_view",
        date_from="2025-01-01",
        limit=50,
        offset=0,
    ))

    assert len(records) == 1
    assert records[0].user_id == "r1"
    assert records[0].details == {"candidateId": "c1"}
    assert records[0].timestamp == "2025-01-15T10:00:00Z"

    request = backend.requests[0]
    assert request.headers["Authorization"] == "Bearer abc"
    assert dict(request.url.params) == {
        "userId": "r1",
        "activityType": "resume_view",
        "from": "2025-01-01",
        "limit": "50",
    }


def test_unsuccessful_envelope_returns_empty_list(backend):
    backend.responses["/usage/activities"] = {"success": False, "message": "User is not associated with any company"}
    assert asyncio.run(backend.client().get_usage_activities()) == []


def test_non_list_data_returns_empty_list(backend):
    backend.responses["/usage/summary"] = {"success": True, "data": {"unexpected": "shape"}}
    assert asyncio.run(backend.client().get_usage_summary()) == []


def test_malformed_rows_are_skipped(backend):
    backend.set_data("/usage/summary", [
        {"userId": "r1", "name": "Rita", "quotas": []},
        "not a row",
        {"name": "missing user id"},
        {"userId": "r2", "quotas": [{"quotaType": "job_postings", "used": "lots"}]},
    ])
    rows = asyncio.run(backend.client().get_usage_summary())
    assert [r.user_id for r in rows] == ["r1"]


def test_posting_insights_parse(backend):
    backend.set_data("/usage/posting-insights", [
        {"recruiterId": 12, "recruiterEmail": "r@example.com", "totalJobs": 4, "totalApplications": 9},
    ])
    rows = asyncio.run(backend.client().get_posting_insights(date_to="2025-02-01"))
    assert rows[0].recruiter_id == "12"
    assert rows[0].total_applications == 9
    assert backend.params_for("/usage/posting-insights") == [{"to": "2025-02-01"}]


def test_passthrough_endpoints_drop_non_dict_rows(backend):
    backend.set_data("/usage/search-insights", [{"term": "python", "count": 4}, 3])
    backend.set_data("/usage/recruiter-performance", [{"recruiterId": "r1", "score": 10}])
    client = backend.client()

    assert asyncio.run(client.get_search_insights(limit=5)) == [{"term": "python", "count": 4}]
    assert asyncio.run(client.get_recruiter_performance()) == [{"recruiterId": "r1", "score": 10}]


def test_error_status_raises_backend_error(backend):
    backend.responses["/usage/summary"] = httpx.Response(500, json={"success": False})

    with pytest.raises(BackendError) as exc_info:
        asyncio.run(backend.client().get_usage_summary())

    assert exc_info.value.status_code == 500
    assert exc_info.value.path == "/usage/summary"


def test_invalid_json_raises_backend_error(backend):
    backend.responses["/usage/summary"] = httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(BackendError):
        asyncio.run(backend.client().get_usage_summary())


def test_transport_error_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = BackendClient("http://backend.test/api", transport=httpx.MockTransport(handler))

    with pytest.raises(BackendError) as exc_info:
        asyncio.run(client.get_usage_activities())

    assert exc_info.value.status_code is None


def test_no_token_sends_no_authorization_header(backend):
    client = BackendClient("http://backend.test/api/", transport=httpx.MockTransport(backend.handler))
    asyncio.run(client.get_usage_summary())

    request = backend.requests[0]
    assert "Authorization" not in request.headers
    assert request.url.path == "/api/usage/summary"


def test_get_quotas_filters_by_recruiter(backend):
    backend.set_data("/usage/quotas", [
        {"id": 1, "userId": "r1", "quotaType": "resume_views", "used": 4, "limit": 100},
        {"userId": "r1", "used": 1},
    ])

    quotas = asyncio.run(backend.client().get_quotas("r1"))

    assert [(q.quota_type, q.used, q.limit) for q in quotas] == [("resume_views", 4, 100)]
    assert backend.params_for("/usage/quotas") == [{"userId": "r1"}]


def test_update_quota_puts_json_body(backend):
    backend.responses["/usage/quotas"] = {
        "success": True,
        "data": {"userId": "r1", "quotaType": "job_postings", "used": 0, "limit": 15},
        "created": True,
    }

    quota = asyncio.run(backend.client(token="abc").update_quota("r1", "job_postings", 15, reset_used=True))

    assert quota.user_id == "r1"
    assert (quota.quota_type, quota.used, quota.limit) == ("job_postings", 0, 15)

    request = backend.requests[0]
    assert request.method == "PUT"
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {
        "userId": "r1",
        "quotaType": "job_postings",
        "limit": 15,
        "resetUsed": True,
    }


@pytest.mark.parametrize("body", [
    {"success": False, "message": "userId, quotaType and numeric limit are required"},
    {"success": True, "data": None},
    {"success": True, "data": {"userId": "r1", "limit": "many"}},
])
def test_unconfirmed_quota_update_returns_none(backend, body):
    backend.responses["/usage/quotas"] = body
    assert asyncio.run(backend.client().update_quota("r1", "job_postings", 15)) is None


def test_quota_update_error_status_raises_backend_error(backend):
    backend.responses["/usage/quotas"] = httpx.Response(400, json={"success": False})

    with pytest.raises(BackendError) as exc_info:
        asyncio.run(backend.client().update_quota("r1", "job_postings", 15))

    assert exc_info.value.status_code == 400
    assert exc_info.value.path == "/usage/quotas"


def test_request_id_is_forwarded(backend):
    client = BackendClient(
        "http://backend.test/api",
        transport=httpx.MockTransport(backend.handler),
        request_id="req-9",
    )
    asyncio.run(client.get_usage_summary())

    assert backend.requests[0].headers["X-Request-ID"] == "req-9"
