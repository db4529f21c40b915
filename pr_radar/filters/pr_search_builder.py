"""gh search prs parameter model and CLI arg construction."""

from dataclasses import dataclass
from typing import List, Optional

WORKLIST_FIELDS = "number,title,url,author,createdAt"
COUNT_FIELDS = "number"


@dataclass
class PRSearchParams:
    """Scope of one `gh search prs` call."""
    repo: str
    state: Optional[str] = None
    review_requested: Optional[str] = None
    author: Optional[str] = None
    review: Optional[str] = None
    reviewed_by: Optional[str] = None
    merged: bool = False
    merged_at: Optional[str] = None
    json_fields: str = WORKLIST_FIELDS
    limit: int = 50

    @classmethod
    def merged_since(cls, repo: str, start: str, limit: int, **kwargs) -> "PRSearchParams":
        """Merged PRs with a merge date on or after `start`."""
        return cls(repo=repo, merged=True, merged_at=f">={start}",
                   json_fields=COUNT_FIELDS, limit=limit, **kwargs)

    @classmethod
    def merged_between(cls, repo: str, start: str, end: str, limit: int, **kwargs) -> "PRSearchParams":
        """Merged PRs with a merge date in the inclusive range start..end."""
        return cls(repo=repo, merged=True, merged_at=f"{start}..{end}",
                   json_fields=COUNT_FIELDS, limit=limit, **kwargs)


class PRSearchBuilder:
    """Translates PRSearchParams to gh CLI args list."""

    def __init__(self, params: PRSearchParams):
        self.params = params

    def build(self) -> List[str]:
        """Build the full gh search prs command args."""
        args = ["search", "prs", "--repo", self.params.repo]

        self._add_state(args)
        self._add_people_filters(args)
        self._add_merge_filters(args)

        args.extend(["--json", self.params.json_fields])
        args.extend(["--limit", str(self.params.limit)])
        return args

    def _add_state(self, args):
        p = self.params
        if p.state in ("open", "closed"):
            args.extend(["--state", p.state])

    def _add_people_filters(self, args):
        p = self.params
        if p.review_requested:
            args.extend(["--review-requested", p.review_requested])
        if p.author:
            args.extend(["--author", p.author])
        if p.review:
            args.extend(["--review", p.review])
        if p.reviewed_by:
            args.extend(["--reviewed-by", p.reviewed_by])

    def _add_merge_filters(self, args):
        p = self.params
        if p.merged:
            args.append("--merged")
        if p.merged_at:
            args.extend(["--merged-at", p.merged_at])
