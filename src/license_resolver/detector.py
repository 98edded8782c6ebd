"""Resolve raw license declarations to canonical licenses

Each declaration is split into tokens. A token is resolved by the first
strategy that succeeds:

1. alias table
2. known license URL
3. GitHub license detection for GitHub license blob URLs
4. fingerprint of the file named in ``SEE LICENSE IN <file>``

Strategies 1 and 2 are table lookups. Strategies 3 and 4 need the network;
they run concurrently and all of them are awaited. The package resolves when
at least one token resolves.
"""

import concurrent.futures
import contextvars
import dataclasses
import logging
from enum import StrEnum

import requests

from . import log, request_session, spdx
from .aliases import AliasTable
from .exceptions import GitHubLicenseError, NoResolvableLicenseError
from .github import GitHubLicenseDetector
from .messages import MessageCatalog, Messages
from .packageinfo import PackageInfo
from .result import Result
from .settings import ResolverSettings
from .sources import SourceFileLicenseFetcher, see_license_in
from .tables import LicenseTables
from .urls import UrlLicenseMapper

logger = logging.getLogger(__name__)


class Strategy(StrEnum):
    ALIAS = "alias"
    URL = "url"
    GITHUB = "github"
    SOURCE_FILE = "source-file"


@dataclasses.dataclass(frozen=True, slots=True)
class ResolutionAttempt:
    token: str
    strategy: Strategy | None = None
    license: str | None = None
    reason: str = ""

    @property
    def resolved(self) -> bool:
        return self.license is not None

    def __str__(self) -> str:
        if self.license is not None:
            return f"{self.token!r} -> {self.license} ({self.strategy})"
        return f"{self.token!r} unresolved ({self.strategy or 'no strategy'}: {self.reason})"


class LicenseDetector:
    """Resolve the licenses of a package

    The lookup tables, HTTP session and messages are dependencies of the
    detector, tests and applications can replace each of them.
    """

    def __init__(
        self,
        tables: LicenseTables | None = None,
        *,
        settings: ResolverSettings | None = None,
        session: requests.Session | None = None,
        messages: Messages | None = None,
    ) -> None:
        if settings is None:
            settings = ResolverSettings()
        if tables is None:
            tables = settings.license_tables()
        if session is None:
            session = request_session.session_for_api(settings.github_api_url)
        self.settings = settings
        self.alias_table = AliasTable(tables)
        self.url_mapper = UrlLicenseMapper(tables)
        self.github = GitHubLicenseDetector(
            self.alias_table,
            session,
            github_api_url=settings.github_api_url,
            github_token=settings.github_token,
        )
        self.source_fetcher = SourceFileLicenseFetcher(
            tables,
            session,
            raw_content_url=settings.raw_content_url,
            default_revision=settings.default_revision,
        )
        self.messages: Messages = messages or MessageCatalog()

    @property
    def vocabulary(self) -> frozenset[str]:
        return self.alias_table.vocabulary

    def github_license_detect(self, slug: Result[str]) -> str:
        """Canonical license GitHub detected for an ``owner/repo`` slug

        A failed *slug* re-raises its original exception.
        """
        return self.github.detect(slug)

    def tokens(self, declaration: str) -> list[str]:
        """Candidate tokens of one raw declaration"""
        # "Apache License, Version 2.0" is one license, not a list
        if self.alias_table.normalize(declaration) is not None:
            return [declaration.strip()]
        return spdx.split(declaration)

    def resolve_licenses(
        self, package_info: PackageInfo, revision: str | None = None
    ) -> set[str]:
        """Resolve all license declarations of *package_info*

        *revision* selects the source revision for ``SEE LICENSE IN``
        files, the repository's default branch is used without it.

        Raises :exc:`NoResolvableLicenseError` when no declaration resolves.
        """
        with log.package_ctxvar_context(package_info):
            tokens: list[str] = []
            for declaration in package_info.licenses:
                tokens.extend(self.tokens(declaration))
            logger.debug("license tokens: %s", tokens)

            attempts: list[ResolutionAttempt] = []
            remote_tokens: list[str] = []
            for token in tokens:
                attempt = self._resolve_local(token)
                if attempt is None:
                    remote_tokens.append(token)
                else:
                    attempts.append(attempt)
            attempts.extend(
                self._resolve_remote_all(package_info, remote_tokens, revision)
            )

            resolved: set[str] = set()
            for attempt in attempts:
                logger.debug("%s", attempt)
                if attempt.license is not None:
                    resolved.add(attempt.license)

            if not resolved:
                raise self._not_found(package_info)
            logger.info("resolved licenses: %s", sorted(resolved))
            return resolved

    def _resolve_local(self, token: str) -> ResolutionAttempt | None:
        """Table lookups, None when the token needs a network lookup"""
        license_id = self.alias_table.normalize(token)
        if license_id is not None:
            return ResolutionAttempt(token, Strategy.ALIAS, license_id)
        license_id = self.url_mapper.resolve(token)
        if license_id is not None:
            return ResolutionAttempt(token, Strategy.URL, license_id)
        if self.url_mapper.github_slug(token).is_ok:
            return None
        if see_license_in(token) is not None:
            return None
        return ResolutionAttempt(token, reason="unknown license")

    def _resolve_remote_all(
        self,
        package_info: PackageInfo,
        tokens: list[str],
        revision: str | None,
    ) -> list[ResolutionAttempt]:
        """Run network lookups concurrently and wait for all of them"""
        # the same file or repository is looked up only once
        unique_tokens = list(dict.fromkeys(tokens))
        if not unique_tokens:
            return []
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.settings.max_jobs,
            thread_name_prefix="license-lookup",
        ) as executor:
            futures: list[concurrent.futures.Future[ResolutionAttempt]] = [
                executor.submit(
                    # worker threads need the package context for log messages
                    contextvars.copy_context().run,
                    self._resolve_remote,
                    package_info,
                    token,
                    revision,
                )
                for token in unique_tokens
            ]
            return [future.result() for future in futures]

    def _resolve_remote(
        self, package_info: PackageInfo, token: str, revision: str | None
    ) -> ResolutionAttempt:
        slug = self.url_mapper.github_slug(token)
        if slug.is_ok:
            try:
                license_id = self.github.detect(slug)
            except (GitHubLicenseError, requests.RequestException) as err:
                logger.info("GitHub license detection failed for %s: %s", token, err)
                return ResolutionAttempt(token, Strategy.GITHUB, reason=str(err))
            return ResolutionAttempt(token, Strategy.GITHUB, license_id)

        file_name = see_license_in(token)
        if file_name is None:
            return ResolutionAttempt(token, reason="unknown license")
        license_id = self.source_fetcher.fetch_and_match(
            package_info.source_connection_url, file_name, revision
        )
        if license_id is None:
            return ResolutionAttempt(
                token,
                Strategy.SOURCE_FILE,
                reason=f"no known license in {file_name}",
            )
        return ResolutionAttempt(token, Strategy.SOURCE_FILE, license_id)

    def _not_found(self, package_info: PackageInfo) -> NoResolvableLicenseError:
        message = self.messages(
            "licensenotfound",
            package_info.registry.metadata_file,
            package_info.source_connection_url,
            ", ".join(package_info.licenses),
        )
        logger.info("no license found in %s", list(package_info.licenses))
        return NoResolvableLicenseError(
            message,
            registry=package_info.registry,
            source_connection_url=package_info.source_connection_url,
            licenses=package_info.licenses,
        )
