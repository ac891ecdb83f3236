"""Latest-release metadata from the GitHub releases API."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from cwtui.errors import ReleaseFetchError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Release:
    tag_name: str
    body: str = ""
    published_at: str = ""

    @property
    def published_date(self) -> str:
        """`published_at` up to the `T` of the ISO timestamp."""
        date, sep, _ = self.published_at.partition("T")
        return date if sep and date else self.published_at


def fetch_latest(url: str, timeout: float = 10.0) -> Release:
    """Fetch the latest release.

    Raises:
        ReleaseFetchError: network failure, rate limiting, non-200 status or bad JSON.
    """
    try:
        response = httpx.get(url, headers={"Accept": "application/vnd.github+json"}, timeout=timeout)
    except httpx.HTTPError as e:
        raise ReleaseFetchError(f"fetching latest release: {e}") from e

    if response.status_code in (403, 429):
        raise ReleaseFetchError("GitHub API rate limited. Try again later")
    if response.status_code != 200:
        raise ReleaseFetchError(f"GitHub API returned status {response.status_code}")

    try:
        data = response.json()
    except ValueError as e:
        raise ReleaseFetchError(f"parsing release response: {e}") from e
    if not isinstance(data, dict) or not data.get("tag_name"):
        raise ReleaseFetchError("parsing release response: missing tag_name")

    logger.debug("Latest release %s", data["tag_name"])
    return Release(
        tag_name=str(data["tag_name"]),
        body=str(data.get("body") or ""),
        published_at=str(data.get("published_at") or ""),
    )
