from __future__ import annotations
from pydantic import BaseModel


class DashboardSummary(BaseModel):
    assets: dict[str, int]
    issues: dict[str, int]
    total_assets: int
    open_issues: int
