"""Services for Usage Pulse API."""

from .rollup import RollupScope, classify, compute_rollup
from .insights import (
    approximate_total,
    format_quota_type,
    merge_identities,
    posting_series,
    quota_chart_rows,
    recruiter_chart_rows,
)

__all__ = [
    "RollupScope",
    "classify",
    "compute_rollup",
    "approximate_total",
    "format_quota_type",
    "merge_identities",
    "posting_series",
    "quota_chart_rows",
    "recruiter_chart_rows",
]
