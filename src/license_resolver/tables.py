"""Static license lookup tables

The tables are maintained data, not code. The bundled copy lives in
``data/licenses.yaml`` and is loaded once per process by
:meth:`LicenseTables.default`. Callers can load substitute tables with
:meth:`LicenseTables.from_file` and hand them to the detector.
"""

import functools
import importlib.resources
import logging
import pathlib
import typing
from collections.abc import Mapping

import pydantic
import yaml
from pydantic import Field

from .packageinfo import MODEL_CONFIG

logger = logging.getLogger(__name__)

DEFAULT_TABLES_RESOURCE = "licenses.yaml"


class Fingerprint(pydantic.BaseModel):
    """Distinctive phrases of a full license text

    ::

      license: BSD 2-Clause
      contains:
        - Redistribution and use in source and binary forms
      excludes:
        - Neither the name of
    """

    model_config = MODEL_CONFIG

    license: str
    """Canonical license identifier"""

    contains: tuple[str, ...]
    """All phrases must occur in the text"""

    excludes: tuple[str, ...] = ()
    """None of the phrases may occur in the text"""

    @pydantic.field_validator("contains")
    @classmethod
    def validate_contains(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("a fingerprint needs at least one phrase")
        return v


class LicenseTables(pydantic.BaseModel):
    """Alias, known URL, and fingerprint tables

    ::

      aliases:
        MIT:
          - MIT/X11
          - Expat
      known_urls:
        http://polymer.github.io/LICENSE.txt: BSD 3-Clause
      fingerprints:
        - license: Unlicense
          contains:
            - This is free and unencumbered software
    """

    model_config = MODEL_CONFIG

    aliases: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    """Canonical license identifier to alternative spellings"""

    known_urls: Mapping[str, str] = Field(default_factory=dict)
    """License text URL to canonical license identifier"""

    fingerprints: tuple[Fingerprint, ...] = ()
    """Ordered, the first matching fingerprint wins"""

    @pydantic.field_validator("aliases", mode="before")
    @classmethod
    def before_none_aliases(cls, v: typing.Any) -> typing.Any:
        # YAML "MIT:" without a list parses as None
        if isinstance(v, Mapping):
            return {key: value or () for key, value in v.items()}
        return v

    @pydantic.model_validator(mode="after")
    def validate_vocabulary(self) -> "LicenseTables":
        vocabulary = self.vocabulary
        for url, license_id in self.known_urls.items():
            if license_id not in vocabulary:
                raise ValueError(
                    f"known URL {url} maps to unknown license {license_id!r}"
                )
        for fingerprint in self.fingerprints:
            if fingerprint.license not in vocabulary:
                raise ValueError(
                    f"fingerprint for unknown license {fingerprint.license!r}"
                )
        return self

    @property
    def vocabulary(self) -> frozenset[str]:
        """All canonical license identifiers"""
        return frozenset(self.aliases)

    def merged(
        self,
        *,
        aliases: Mapping[str, typing.Iterable[str]] | None = None,
        known_urls: Mapping[str, str] | None = None,
        fingerprints: typing.Iterable[Fingerprint] = (),
    ) -> "LicenseTables":
        """Return new tables with additional entries

        Extra aliases are appended to existing canonical licenses or add new
        ones. Extra fingerprints are checked before the existing ones.
        """
        new_aliases: dict[str, tuple[str, ...]] = dict(self.aliases)
        for license_id, spellings in (aliases or {}).items():
            new_aliases[license_id] = new_aliases.get(license_id, ()) + tuple(
                spellings
            )
        new_urls = dict(self.known_urls)
        new_urls.update(known_urls or {})
        return LicenseTables(
            aliases=new_aliases,
            known_urls=new_urls,
            fingerprints=tuple(fingerprints) + self.fingerprints,
        )

    @classmethod
    def from_string(
        cls,
        raw_yaml: str,
        *,
        source: pathlib.Path | str | None = None,
    ) -> "LicenseTables":
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
                f"failed to load license tables (source: {source!r}): {err}"
            ) from err

    @classmethod
    def from_file(cls, filename: pathlib.Path) -> "LicenseTables":
        """Load from file

        Raises :exc:`FileNotFoundError` when the file is not found.
        """
        filename = filename.absolute()
        logger.info("loading license tables from %s", filename)
        raw_yaml = filename.read_text(encoding="utf-8")
        return cls.from_string(raw_yaml, source=filename)

    @classmethod
    @functools.cache
    def default(cls) -> "LicenseTables":
        """Bundled tables, loaded once"""
        resource = importlib.resources.files(__package__).joinpath(
            "data", DEFAULT_TABLES_RESOURCE
        )
        logger.debug("loading bundled license tables")
        return cls.from_string(
            resource.read_text(encoding="utf-8"),
            source=f"{__package__}/data/{DEFAULT_TABLES_RESOURCE}",
        )
