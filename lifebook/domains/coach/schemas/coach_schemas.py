"""Coach request schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

IssueStatus = Literal["open", "in_progress", "resolved", "dismissed"]


class CoachScanRequest(BaseModel):
    # Text to analyse instead of the stored entry, e.g. an unsaved draft.
    content: Optional[str] = None


class CoachIssueListFilter(BaseModel):
    status: Optional[IssueStatus] = None


class CoachIssueUpdate(BaseModel):
    status: Optional[IssueStatus] = None
    severity: Optional[int] = Field(default=None, ge=0, le=10)
