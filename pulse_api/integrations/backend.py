"""Client for the job portal's REST backend (usage endpoints)."""

from typing import Any, Optional, TypeVar

import httpx
import structlog
from fastapi import Request
from pydantic import BaseModel, ValidationError

from pulse_api.config.settings import settings
from pulse_api.schemas.activities import ActivityRecord
from pulse_api.schemas.usage import PostingInsightRow, QuotaRecord, UsageSummaryRow
from pulse_api.services.token import get_token_from_request

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


class BackendError(Exception):
    """Raised when the portal backend cannot be reached or returns an error status."""

    def __init__(self, message: str, path: str, status_code: Optional[int] = None):
        self.path = path
        self.status_code = status_code
        super().__init__(message)


class BackendClient:
    """
    Async client for the portal's ``/usage`` endpoints.

    Every call forwards the caller's bearer token so the backend scopes the
    data to the caller's company, and the request id so backend logs can be
    matched to ours. Responses use the ``{"success", "data"}``
    envelope; an unsuccessful envelope on a read yields an empty list so views
    render their "no activity" state.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        request_id: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.request_id = request_id
        self.timeout = timeout
        self._transport = transport

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.request_id:
            headers["X-Request-ID"] = self.request_id
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a request to an envelope endpoint and return its ``data``.

        Returns None when the backend answers with an unsuccessful envelope.
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.request(
                    method, path, params=query, json=json, headers=self.headers
                )
                response.raise_for_status()
                body = response.json()

            except httpx.HTTPStatusError as e:
                logger.error(
                    "Backend request failed",
                    method=method,
                    path=path,
                    status_code=e.response.status_code,
                    response=e.response.text[:500],
                )
                raise BackendError(
                    f"Backend returned {e.response.status_code}",
                    path=path,
                    status_code=e.response.status_code,
                ) from e

            except httpx.HTTPError as e:
                logger.error("Backend request error", method=method, path=path, error=str(e))
                raise BackendError(f"Backend request error: {e}", path=path) from e

            except ValueError as e:
                logger.error("Backend returned invalid JSON", method=method, path=path, error=str(e))
                raise BackendError("Backend returned invalid JSON", path=path) from e

        if not isinstance(body, dict) or not body.get("success"):
            logger.warning(
                "Backend reported failure",
                method=method,
                path=path,
                message=body.get("message") if isinstance(body, dict) else None,
            )
            return None

        return body.get("data")

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> list[Any]:
        """GET an envelope endpoint and return its ``data`` list."""
        data = await self._request("GET", path, params=params)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Backend returned non-list data", path=path)
            return []
        return data

    @staticmethod
    def _parse_rows(model: type[M], rows: list[Any], path: str) -> list[M]:
        """Validate rows one by one, skipping the ones that do not fit."""
        parsed = []
        skipped = 0
        for row in rows:
            if not isinstance(row, dict):
                skipped += 1
                continue
            try:
                parsed.append(model.model_validate(row))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.warning("Skipped malformed backend rows", path=path, skipped=skipped)
        return parsed

    async def get_usage_activities(
        self,
        user_id: Optional[str] = None,
        activity_type: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[ActivityRecord]:
        """Fetch activity log records, newest first."""
        path = "/usage/activities"
        rows = await self._get(path, {
            "userId": user_id,
            "activityType": activity_type,
            "from": date_from,
            "to": date_to,
            "limit": limit,
            "offset": offset or None,
        })
        return self._parse_rows(ActivityRecord, rows, path)

    async def get_usage_summary(self) -> list[UsageSummaryRow]:
        """Fetch recruiter identities and quota usage for the caller's company."""
        path = "/usage/summary"
        rows = await self._get(path)
        return self._parse_rows(UsageSummaryRow, rows, path)

    async def get_posting_insights(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[PostingInsightRow]:
        """Fetch jobs posted and applications received per recruiter."""
        path = "/usage/posting-insights"
        rows = await self._get(path, {"from": date_from, "to": date_to})
        return self._parse_rows(PostingInsightRow, rows, path)

    async def get_search_insights(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Fetch top search terms (passed through as-is)."""
        rows = await self._get("/usage/search-insights", {"from": date_from, "to": date_to, "limit": limit})
        return [row for row in rows if isinstance(row, dict)]

    async def get_recruiter_performance(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Fetch the recruiter leaderboard (passed through as-is)."""
        rows = await self._get("/usage/recruiter-performance", {"from": date_from, "to": date_to, "limit": limit})
        return [row for row in rows if isinstance(row, dict)]

    async def get_quotas(self, user_id: str) -> list[QuotaRecord]:
        """Fetch the stored quota rows of one recruiter."""
        path = "/usage/quotas"
        rows = await self._get(path, {"userId": user_id})
        return self._parse_rows(QuotaRecord, rows, path)

    async def update_quota(
        self,
        user_id: str,
        quota_type: str,
        limit: int,
        reset_used: bool = False,
    ) -> Optional[QuotaRecord]:
        """
        Set a recruiter's limit for one quota type.

        The backend creates the quota row when it does not exist yet and
        zeroes ``used`` when ``reset_used`` is set. Returns None when the
        backend does not confirm the update with a quota object.
        """
        path = "/usage/quotas"
        data = await self._request("PUT", path, json={
            "userId": user_id,
            "quotaType": quota_type,
            "limit": limit,
            "resetUsed": reset_used,
        })
        if not isinstance(data, dict):
            return None
        try:
            return QuotaRecord.model_validate(data)
        except ValidationError:
            logger.warning("Backend returned malformed quota", path=path, user_id=user_id)
            return None


def get_backend_client(request: Request) -> BackendClient:
    """
    FastAPI dependency returning a backend client bound to the caller's token.

    Usage:
        @router.get("/summary")
        async def summary(backend: BackendClient = Depends(get_backend_client)):
            ...
    """
    return BackendClient(
        base_url=settings.BACKEND_API_URL,
        token=get_token_from_request(request),
        timeout=settings.BACKEND_TIMEOUT,
        request_id=getattr(request.state, "request_id", None),
    )
