import logging
import os
import pathlib
import typing
from collections.abc import Mapping

import pydantic
import yaml
from pydantic import Field

from .packageinfo import MODEL_CONFIG
from .tables import Fingerprint, LicenseTables

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
RAW_CONTENT_URL = "https://raw.githubusercontent.com"
# raw.githubusercontent.com resolves HEAD to the default branch
DEFAULT_REVISION = "HEAD"


class ResolverSettings(pydantic.BaseModel):
    """Models the settings file ``license-resolver.yaml``

    ::

      github_api_url: https://api.github.com
      raw_content_url: https://raw.githubusercontent.com
      max_jobs: 8
      aliases:
        MIT:
          - MIT-style
      known_urls:
        https://example.com/LICENSE.txt: MIT
    """

    model_config = MODEL_CONFIG

    github_api_url: str = GITHUB_API_URL
    """Base URL of the GitHub REST API"""

    raw_content_url: str = RAW_CONTENT_URL
    """Base URL serving raw repository files as ``{owner}/{repo}/{rev}/{path}``"""

    default_revision: str = DEFAULT_REVISION
    """Revision used for source files when the caller gives none"""

    max_jobs: int | None = Field(default=None, ge=1)
    """Maximum number of concurrent network lookups per package"""

    aliases: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    """Additional alias spellings, added to the license tables"""

    known_urls: Mapping[str, str] = Field(default_factory=dict)
    """Additional known license URLs"""

    fingerprints: tuple[Fingerprint, ...] = ()
    """Additional fingerprints, checked before the bundled ones"""

    @pydantic.field_validator("github_api_url", "raw_content_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def github_token(self) -> str | None:
        """GitHub token from the environment, raises the API rate limit"""
        return os.environ.get("GITHUB_TOKEN") or None

    def license_tables(self, base: LicenseTables | None = None) -> LicenseTables:
        """Bundled (or *base*) tables with the settings' additions"""
        if base is None:
            base = LicenseTables.default()
        if not (self.aliases or self.known_urls or self.fingerprints):
            return base
        return base.merged(
            aliases=self.aliases,
            known_urls=self.known_urls,
            fingerprints=self.fingerprints,
        )

    @classmethod
    def from_string(
        cls,
        raw_yaml: str,
        *,
        source: pathlib.Path | str | None = None,
    ) -> "ResolverSettings":
        """Load from raw yaml string"""
        parsed: typing.Any = yaml.safe_load(raw_yaml)
        if parsed is None:
            # empty file
            parsed = {}
        elif not isinstance(parsed, Mapping):
            raise TypeError(f"invalid yaml, not a dict (source: {source!r}): {parsed}")
        try:
            return cls(**parsed)
        except Exception as err:
            raise RuntimeError(
                f"failed to load settings (source: {source!r}): {err}"
            ) from err

    @classmethod
    def from_file(cls, filename: pathlib.Path) -> "ResolverSettings":
        """Load from file, a missing file gives the default settings"""
        filename = filename.absolute()
        if not filename.is_file():
            logger.debug("settings file %s does not exist, ignoring", filename)
            return cls()
        logger.info("loading settings from %s", filename)
        raw_yaml = filename.read_text(encoding="utf-8")
        return cls.from_string(raw_yaml, source=filename)
