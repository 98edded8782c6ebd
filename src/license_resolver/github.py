"""Ask GitHub which license it detected for a repository

GitHub runs license detection on the default branch of a repository. The
answer is not pinned to a revision, so it reports the current license even
when an older release of the package is being resolved.
"""

import logging
import re

import requests

from .aliases import AliasTable
from .exceptions import GitHubLicenseError
from .http_retry import http_get
from .result import Result
from .settings import GITHUB_API_URL

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

# GitHub's spdx_id when the license file is not recognized
NOASSERTION = "NOASSERTION"


class GitHubLicenseDetector:
    api_url = "{self.github_api_url}/repos/{slug}/license"

    def __init__(
        self,
        alias_table: AliasTable,
        session: requests.Session,
        *,
        github_api_url: str = GITHUB_API_URL,
        github_token: str | None = None,
    ) -> None:
        self.alias_table = alias_table
        self.session = session
        self.github_api_url = github_api_url.rstrip("/")
        self.github_token = github_token

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/vnd.github+json"}
        if self.github_token:
            headers["Authorization"] = f"token {self.github_token}"
        return headers

    def detect(self, slug_result: Result[str]) -> str:
        """Return the canonical license GitHub reports for ``owner/repo``

        A failed *slug_result* re-raises its original exception. All other
        problems raise :exc:`GitHubLicenseError`.
        """
        slug = slug_result.get().strip().strip("/")
        if slug.endswith(".git"):
            slug = slug[:-4]
        if not _SLUG_RE.match(slug):
            raise GitHubLicenseError(slug, "not an owner/repo slug")

        url = self.api_url.format(self=self, slug=slug)
        logger.debug("%s: requesting license from %s", slug, url)
        response = http_get(self.session, url, headers=self._headers())
        if not response.is_ok:
            raise GitHubLicenseError(
                slug, f"license lookup failed: {response.error}"
            ) from response.error

        try:
            data = response.get().json()
        except ValueError as err:
            raise GitHubLicenseError(slug, f"invalid response: {err}") from err
        info = data.get("license") if isinstance(data, dict) else None
        if not isinstance(info, dict):
            raise GitHubLicenseError(slug, "repository has no license")

        for field in ("spdx_id", "key", "name"):
            candidate = info.get(field)
            if not candidate or candidate == NOASSERTION:
                continue
            license_id = self.alias_table.normalize(candidate)
            if license_id is not None:
                logger.info("%s: GitHub detected license %s", slug, license_id)
                return license_id
        raise GitHubLicenseError(
            slug, f"no known license detected (GitHub reports {info!r})"
        )
