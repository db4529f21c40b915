"""Data model for worklists, approvals and review stats."""

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pr_radar.errors import ParseFailure


class Category(str, Enum):
    """Worklist categories. Values are the names used on the wire."""

    HIGH_PRIORITY = "high"
    MEDIUM_PRIORITY = "medium"
    LOW_PRIORITY = "low"
    MY_APPROVED = "approved"
    MY_CHANGES_REQUESTED = "changes_requested"
    MY_NEEDS_REVIEW = "needs_review"

    @classmethod
    def parse(cls, value: str) -> "Category":
        """Look up a category by wire value; raises ValueError if unknown."""
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Unknown category '{value}'. Expected one of: {valid}")


@dataclass(frozen=True)
class Approval:
    username: str
    approved_at: str


@dataclass(frozen=True)
class PullRequestSummary:
    """One row of a `gh search prs` result."""

    number: int
    title: str
    url: str
    author: str
    created_at: str

    @classmethod
    def from_search_item(cls, item: Dict[str, Any]) -> "PullRequestSummary":
        """Build from a search item; raises ParseFailure on a schema mismatch."""
        try:
            number = item["number"]
            if not isinstance(number, int) or isinstance(number, bool) or number < 0:
                raise TypeError(f"bad PR number {number!r}")
            author = item.get("author") or {}
            return cls(
                number=number,
                title=str(item["title"]),
                url=str(item["url"]),
                author=str(author.get("login", "")),
                created_at=str(item["createdAt"]),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ParseFailure(f"Failed to parse PR JSON: {e}")


@dataclass
class PRDetails:
    """Approvals and pending reviewers for one PR, from the batch query."""

    approvals: List[Approval] = field(default_factory=list)
    requested_reviewers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PullRequest:
    """A search summary joined with its review details."""

    number: int
    title: str
    url: str
    author: str
    created_at: str
    approvals: Tuple[Approval, ...] = ()
    requested_reviewers: Tuple[str, ...] = ()

    @classmethod
    def from_summary(cls, summary: PullRequestSummary, details: Optional[PRDetails] = None) -> "PullRequest":
        details = details or PRDetails()
        return cls(
            number=summary.number,
            title=summary.title,
            url=summary.url,
            author=summary.author,
            created_at=summary.created_at,
            approvals=tuple(details.approvals),
            requested_reviewers=tuple(details.requested_reviewers),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "author": self.author,
            "created_at": self.created_at,
            "approvals": [asdict(a) for a in self.approvals],
            "requested_reviewers": list(self.requested_reviewers),
        }


@dataclass(frozen=True)
class CachedResultSet:
    category: Category
    prs: Tuple[PullRequest, ...]
    cached_at: float


@dataclass
class ReviewStats:
    """Merged / approved counters over three windows."""

    prs_merged_mtd: int = 0
    prs_merged_prev_month: int = 0
    prs_merged_prev_3_months: int = 0
    prs_approved_mtd: int = 0
    prs_approved_prev_month: int = 0
    prs_approved_prev_3_months: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class DateWindows:
    today: date
    mtd_start: date
    prev_month_start: date
    prev_month_end: date
    ninety_day_start: date
