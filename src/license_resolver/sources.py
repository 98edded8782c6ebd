"""Resolve ``SEE LICENSE IN <file>`` declarations

npm allows packages to point at a license file instead of naming the
license. The file is fetched from the package's GitHub repository at the
requested revision and compared with a table of license fingerprints.
"""

import logging
import re
from urllib.parse import quote, urlparse

import requests

from .http_retry import http_get
from .settings import DEFAULT_REVISION, RAW_CONTENT_URL
from .tables import Fingerprint, LicenseTables

logger = logging.getLogger(__name__)

_SEE_LICENSE_RE = re.compile(r"^see\s+licen[cs]e\s+in\s+(?P<filename>\S.*)$", re.I)
# git@github.com:owner/repo.git
_SCP_LIKE_RE = re.compile(r"^[\w.-]+@(?P<host>[\w.-]+):(?P<path>[^/].*)$")
_WHITESPACE_RE = re.compile(r"\s+")
_SUPPORTED_HOSTS = frozenset(["github.com", "www.github.com"])


def see_license_in(token: str) -> str | None:
    """File name of a ``SEE LICENSE IN <file>`` token, or None"""
    match = _SEE_LICENSE_RE.match(token.strip())
    if match is None:
        return None
    filename = match.group("filename").strip().strip("'\"")
    if filename.startswith("./"):
        filename = filename[2:]
    return filename or None


def repository_slug(source_url: str) -> str:
    """``owner/repo`` of a GitHub SCM connection URL

    Understands ``git://``, ``git+https://``, ``git+ssh://``, ``ssh://``,
    scp-like ``git@github.com:owner/repo.git``, ``github:owner/repo`` and
    plain ``https://`` URLs.

    Raises :exc:`ValueError` for anything else.
    """
    url = source_url.strip()
    if url.startswith("scm:git:"):
        url = url[len("scm:git:") :]
    if url.startswith("github:"):
        host, path = "github.com", url[len("github:") :]
    elif match := _SCP_LIKE_RE.match(url):
        host, path = match.group("host"), match.group("path")
    else:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"unsupported source URL: {source_url!r}")
        host, path = parsed.hostname, parsed.path
    if host.lower() not in _SUPPORTED_HOSTS:
        raise ValueError(f"unsupported source host {host!r}: {source_url!r}")
    parts = [p for p in path.split("#", 1)[0].split("/") if p]
    if len(parts) < 2:
        raise ValueError(f"no owner/repo in source URL: {source_url!r}")
    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[:-4]
    return f"{owner}/{repo}"


class FingerprintMatcher:
    """Identify full license texts by distinctive phrases"""

    def __init__(self, fingerprints: tuple[Fingerprint, ...]) -> None:
        self._fingerprints = [
            (
                fp.license,
                [_normalize_text(phrase) for phrase in fp.contains],
                [_normalize_text(phrase) for phrase in fp.excludes],
            )
            for fp in fingerprints
        ]

    def match(self, text: str) -> str | None:
        normalized = _normalize_text(text)
        for license_id, contains, excludes in self._fingerprints:
            if all(phrase in normalized for phrase in contains) and not any(
                phrase in normalized for phrase in excludes
            ):
                return license_id
        return None


def _normalize_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


class SourceFileLicenseFetcher:
    raw_url = "{self.raw_content_url}/{slug}/{revision}/{path}"

    def __init__(
        self,
        tables: LicenseTables,
        session: requests.Session,
        *,
        raw_content_url: str = RAW_CONTENT_URL,
        default_revision: str = DEFAULT_REVISION,
    ) -> None:
        self.matcher = FingerprintMatcher(tables.fingerprints)
        self.session = session
        self.raw_content_url = raw_content_url.rstrip("/")
        self.default_revision = default_revision

    def raw_file_url(
        self, source_url: str, file_name: str, revision: str | None = None
    ) -> str:
        """Raw content URL of *file_name* in the repository of *source_url*"""
        slug = repository_slug(source_url)
        return self.raw_url.format(
            self=self,
            slug=slug,
            revision=quote(revision or self.default_revision),
            path=quote(file_name.lstrip("/")),
        )

    def fetch_and_match(
        self, source_url: str, file_name: str, revision: str | None = None
    ) -> str | None:
        """Fetch a license file and identify its license

        Returns None when the file cannot be located or fetched, or when
        its text does not match any fingerprint.
        """
        try:
            url = self.raw_file_url(source_url, file_name, revision)
        except ValueError as err:
            logger.debug("cannot locate %s: %s", file_name, err)
            return None

        logger.debug("fetching license file %s", url)
        response = http_get(self.session, url)
        if not response.is_ok:
            logger.info("could not fetch license file %s: %s", url, response.error)
            return None

        license_id = self.matcher.match(response.get().text)
        if license_id is None:
            logger.info("license file %s does not match a known license", url)
        else:
            logger.debug("license file %s matches %s", url, license_id)
        return license_id
