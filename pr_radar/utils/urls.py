"""PR and issue URL parsing."""

from typing import Optional, Tuple

GITHUB_PREFIX = "https://github.com/"
GRAPHITE_PREFIXES = (
    "https://app.graphite.dev/github/pr/",
    "https://app.graphite.com/github/pr/",
)

Reference = Tuple[str, str, str]


def _clean_url(url: str) -> str:
    """Drop the query string, any #fragment, and trailing slashes."""
    return url.split("?", 1)[0].split("#", 1)[0].rstrip("/")


def _parse_github_path(url: str, kind: str) -> Optional[Reference]:
    if not url.startswith(GITHUB_PREFIX):
        return None
    parts = url[len(GITHUB_PREFIX):].split("/")
    if len(parts) >= 4 and parts[2] == kind:
        return parts[0], parts[1], parts[3]
    return None


def parse_pr_url(url: str) -> Optional[Reference]:
    """Parse a GitHub or Graphite PR URL into (org, repo, number).

    The number is returned as the raw path segment; it is not validated here.
    """
    clean_url = _clean_url(url)

    ref = _parse_github_path(clean_url, "pull")
    if ref:
        return ref

    for prefix in GRAPHITE_PREFIXES:
        if clean_url.startswith(prefix):
            parts = clean_url[len(prefix):].split("/")
            if len(parts) >= 3:
                return parts[0], parts[1], parts[2]
    return None


def parse_issue_url(url: str) -> Optional[Reference]:
    """Parse a GitHub issue URL into (org, repo, number)."""
    return _parse_github_path(_clean_url(url), "issues")
