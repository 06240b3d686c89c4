"""Asset and issue status rules applied when issues are reported or resolved.

Issue status transitions are deliberately unordered: an admin may move an
issue to any status. ``ISSUE_STATUS_ORDER`` only documents the usual flow.
"""

from __future__ import annotations

from datetime import datetime

from app.models.enums import AssetStatus, IssueSeverity, IssueStatus, IssueType

ISSUE_STATUS_ORDER: tuple[IssueStatus, ...] = (
    IssueStatus.REPORTED,
    IssueStatus.ACKNOWLEDGED,
    IssueStatus.IN_REPAIR,
    IssueStatus.RESOLVED,
)

OPEN_ISSUE_STATUSES: tuple[str, ...] = tuple(
    s.value for s in ISSUE_STATUS_ORDER if s is not IssueStatus.RESOLVED
)


def derive_asset_status_on_report(
    severity: IssueSeverity | str, issue_type: IssueType | str
) -> AssetStatus | None:
    """Return the status a new issue forces on its asset, or None for no change."""
    if IssueSeverity(severity) is IssueSeverity.HIGH or IssueType(issue_type) is IssueType.BREAKDOWN:
        return AssetStatus.OUT_OF_SERVICE
    return None


def derive_asset_status_on_resolve() -> AssetStatus:
    # Other open issues on the same asset are not consulted.
    return AssetStatus.AVAILABLE


def is_terminal(issue_status: IssueStatus | str) -> bool:
    return IssueStatus(issue_status) is IssueStatus.RESOLVED


def resolved_at_for(issue_status: IssueStatus | str, now: datetime) -> datetime | None:
    """resolved_at is set exactly when the issue is resolved."""
    return now if is_terminal(issue_status) else None
