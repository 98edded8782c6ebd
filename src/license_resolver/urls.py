import logging
import re
from urllib.parse import urlparse

from .result import Result
from .tables import LicenseTables

logger = logging.getLogger(__name__)

GITHUB_HOSTS = frozenset(["github.com", "www.github.com"])

# LICENSE, LICENSE.md, LICENCE.txt, COPYING, ...
_LICENSE_FILE_RE = re.compile(r"^(?:licen[cs]e|copying)", re.IGNORECASE)


def is_url(token: str) -> bool:
    """Is *token* an absolute http(s) URL?"""
    parsed = urlparse(token.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def url_key(url: str) -> str:
    """Lookup key of a license URL, ignores scheme, "www." and trailing slash"""
    parsed = urlparse(url.strip())
    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    key = host + parsed.path.rstrip("/")
    if parsed.query:
        key = f"{key}?{parsed.query}"
    return key


def github_blob_slug(url: str) -> str:
    """Extract ``owner/repo`` from a GitHub license blob URL

    ``https://github.com/facebook/flux/blob/master/LICENSE`` becomes
    ``facebook/flux``. The ref and file path are dropped, the license
    detector asks for the repository's license instead.

    Raises :exc:`ValueError` when the URL does not have that shape.
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or parsed.hostname not in GITHUB_HOSTS:
        raise ValueError(f"not a GitHub URL: {url}")
    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 5 or parts[2] != "blob":
        raise ValueError(f"not a GitHub blob URL: {url}")
    # refs may contain slashes, the file is the last segment
    owner, repo, filename = parts[0], parts[1], parts[-1]
    if not _LICENSE_FILE_RE.match(filename):
        raise ValueError(f"not a license file: {url}")
    return f"{owner}/{repo}"


class UrlLicenseMapper:
    """Map license text URLs to canonical licenses"""

    def __init__(self, tables: LicenseTables) -> None:
        self._known: dict[str, str] = {
            url_key(url): license_id for url, license_id in tables.known_urls.items()
        }

    def resolve(self, token: str) -> str | None:
        """Look *token* up in the known URL table"""
        if not is_url(token):
            return None
        license_id = self._known.get(url_key(token))
        if license_id is not None:
            logger.debug("known license URL %s: %s", token, license_id)
        return license_id

    def github_slug(self, token: str) -> Result[str]:
        """Owner/repo slug of a GitHub license blob URL"""
        return Result.of(lambda: github_blob_slug(token))
