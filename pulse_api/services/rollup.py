"""
Activity rollup: deduplicated "accessed / hired / shortlisted" counts.

Turns a snapshot of the usage activity log into per-recruiter and
company-wide counts. Each record is classified on its own; dedup is
set-based per (recruiter, key), and company totals are the union of keys
across recruiters rather than a sum of per-recruiter counts.

The log is written by many features over time, so records are treated as
partially trusted: anything missing or malformed means "not counted" and
never raises.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union

import structlog
from pydantic import ValidationError

from pulse_api.schemas.activities import ActivityRecord, PersonRef
from pulse_api.schemas.base import coerce_key
from pulse_api.schemas.usage import RecruiterRollup, RollupCounts, RollupResult

logger = structlog.get_logger()


ACCESS_TYPES = frozenset({
    "profile_viewed",
    "resume_view",
    "resume_downloaded",
    "profile_visits",
    "candidate_view",
    "profile_view",
    "candidate_profile_view",
    "application_viewed",
    "application_reviewed",
    "view_resume",
    "view_profile",
})

HIRED_TYPES = frozenset({
    "application_hired",
    "candidate_hired",
    "hired",
})

SHORTLISTED_TYPES = frozenset({
    "application_shortlisted",
    "candidate_shortlisted",
    "requirement_shortlist",
    "application_status_changed",
    "shortlisted",
})

HIRED_STATUS = "hired"
SHORTLISTED_STATUS = "shortlisted"
UNKNOWN_CANDIDATE = "Unknown Candidate"


class RollupScope(str, Enum):
    """Whose activity a rollup covers."""

    SELF = "self"
    COMPANY = "company"


@dataclass(frozen=True)
class Classification:
    """Keys and status resolved from a single activity record."""

    activity_type: str
    candidate_key: Optional[str]
    application_key: Optional[str]
    status: Optional[str]

    @property
    def accessed(self) -> bool:
        return self.activity_type in ACCESS_TYPES and bool(self.candidate_key)

    @property
    def hired(self) -> bool:
        if not self.application_key:
            return False
        return self.activity_type in HIRED_TYPES or self.status == HIRED_STATUS

    @property
    def shortlisted(self) -> bool:
        if not self.application_key:
            return False
        if self.activity_type not in SHORTLISTED_TYPES and self.status != SHORTLISTED_STATUS:
            return False
        # A status change to anything else (e.g. under_review) is not a shortlist
        return not self.status or self.status == SHORTLISTED_STATUS


def _first_key(*values: Any) -> Optional[str]:
    for value in values:
        key = coerce_key(value)
        if key:
            return key
    return None


def resolve_status(details: Mapping[str, Any]) -> Optional[str]:
    """Lower-cased ``newStatus`` (or ``status``) from a details bag."""
    value = details.get("newStatus") or details.get("status")
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value).lower() or None


def classify(record: ActivityRecord) -> Classification:
    """
    Resolve the dedup keys and status of one record.

    Key precedence:
        application key: applicationId, details.applicationId,
            details.candidateId, details.viewedUserId
        candidate key: details.candidateId, details.viewedUserId,
            then the application key

    There is no fallback to the record's own id: a record that
    names no application or candidate cannot be deduplicated and is not counted.
    """
    details = record.details
    application_key = _first_key(
        record.application_id,
        details.get("applicationId"),
        details.get("candidateId"),
        details.get("viewedUserId"),
    )
    candidate_key = _first_key(
        details.get("candidateId"),
        details.get("viewedUserId"),
    ) or application_key

    return Classification(
        activity_type=(record.activity_type or "").lower(),
        candidate_key=candidate_key,
        application_key=application_key,
        status=resolve_status(details),
    )


def candidate_display_name(candidate: Union[Mapping[str, Any], PersonRef, None]) -> str:
    """Best-effort display name for a candidate object."""
    if isinstance(candidate, PersonRef):
        candidate = candidate.model_dump(exclude_none=True)
    if not isinstance(candidate, Mapping):
        return UNKNOWN_CANDIDATE

    first_name = candidate.get("first_name")
    last_name = candidate.get("last_name")
    if first_name and last_name:
        return f"{first_name} {last_name}"

    for key in ("name", "email", "fullName"):
        value = candidate.get(key)
        if value and isinstance(value, str):
            return value
    return UNKNOWN_CANDIDATE


@dataclass
class _Tally:
    """Dedup key sets for one recruiter."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    accessed: set[str] = field(default_factory=set)
    hired: set[str] = field(default_factory=set)
    shortlisted: set[str] = field(default_factory=set)

    def add(self, classification: Classification) -> None:
        if classification.accessed:
            self.accessed.add(classification.candidate_key)
        if classification.hired:
            self.hired.add(classification.application_key)
        if classification.shortlisted:
            self.shortlisted.add(classification.application_key)

    def to_rollup(self) -> RecruiterRollup:
        return RecruiterRollup(
            user_id=self.user_id,
            name=self.name,
            email=self.email,
            accessed=len(self.accessed),
            hired=len(self.hired),
            shortlisted=len(self.shortlisted),
        )


def _as_record(item: Any) -> Optional[ActivityRecord]:
    if isinstance(item, ActivityRecord):
        return item
    if not isinstance(item, Mapping):
        return None
    try:
        return ActivityRecord.model_validate(item)
    except ValidationError as e:
        logger.debug("Skipping unparseable activity record", error=str(e))
        return None


def compute_rollup(
    records: Iterable[Union[ActivityRecord, Mapping[str, Any]]],
    scope: Union[RollupScope, str] = RollupScope.COMPANY,
    actor_id: Optional[str] = None,
) -> RollupResult:
    """
    Compute deduplicated rollup counts from activity records.

    Args:
        records: Activity log snapshot (models or raw camelCase dicts)
        scope: ``company`` groups by every actor found in the records;
            ``self`` attributes records to ``actor_id`` only
        actor_id: The recruiter whose activity is rolled up (``self`` scope)

    Returns:
        Per-recruiter counts, company-wide counts (union of keys) and the
        names of shortlisted candidates

    Raises:
        ValueError: If ``self`` scope is requested without an actor id
    """
    scope = RollupScope(scope)
    if scope is RollupScope.SELF and not actor_id:
        raise ValueError("actor_id is required for self scope")

    tallies: dict[str, _Tally] = {}
    if scope is RollupScope.SELF:
        tallies[actor_id] = _Tally(user_id=actor_id)

    shortlisted_names: set[str] = set()

    for item in records:
        record = _as_record(item)
        if record is None:
            continue

        uid = record.actor_id
        if scope is RollupScope.SELF:
            # Upstream already filtered by user; unattributed rows are ours
            if uid and uid != actor_id:
                continue
            uid = actor_id
        elif not uid:
            continue

        tally = tallies.get(uid)
        if tally is None:
            tally = tallies[uid] = _Tally(user_id=uid)
        if record.user:
            tally.name = tally.name or record.user.name
            tally.email = tally.email or record.user.email

        classification = classify(record)
        tally.add(classification)

        if classification.shortlisted:
            shortlisted_names.add(
                candidate_display_name(record.applicant or record.details.get("candidate"))
            )

    aggregate = RollupCounts(
        accessed=len(set().union(*(t.accessed for t in tallies.values()))),
        hired=len(set().union(*(t.hired for t in tallies.values()))),
        shortlisted=len(set().union(*(t.shortlisted for t in tallies.values()))),
    )
    names = sorted(shortlisted_names)

    logger.debug(
        "Activity rollup computed",
        scope=scope.value,
        recruiters=len(tallies),
        accessed=aggregate.accessed,
        hired=aggregate.hired,
        shortlisted=aggregate.shortlisted,
        shortlisted_candidates=names,
    )

    return RollupResult(
        per_actor={uid: tally.to_rollup() for uid, tally in tallies.items()},
        aggregate=aggregate,
        shortlisted_candidates=names,
    )
