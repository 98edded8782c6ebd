import logging
import re
import typing

from .tables import LicenseTables

logger = logging.getLogger(__name__)

# filler words that do not distinguish licenses
_FILLER_RE = re.compile(r"\b(?:the|licen[cs]es?|version)\b")
_PUNCTUATION_RE = re.compile(r"[^a-z0-9.+]")
# "v2", "v3.0"
_VERSION_PREFIX_RE = re.compile(r"v(?=\d)")
# "2.0" -> "2", but keep "2.1"
_TRAILING_ZERO_RE = re.compile(r"\.0(?!\d)")


def alias_key(text: str) -> str:
    """Reduce a license spelling to its lookup key

    >>> alias_key("BSD 2-Clause") == alias_key("bsd2clause")
    True
    >>> alias_key("Apache License, Version 2.0")
    'apache2'
    """
    key = _FILLER_RE.sub(" ", text.strip().lower())
    key = _PUNCTUATION_RE.sub("", key)
    key = _VERSION_PREFIX_RE.sub("", key)
    key = _TRAILING_ZERO_RE.sub("", key)
    return key.strip(".")


class AliasTable:
    """Map raw license spellings to canonical license identifiers"""

    def __init__(self, tables: LicenseTables) -> None:
        self._vocabulary = tables.vocabulary
        self._spellings = {
            license_id: tuple(spellings)
            for license_id, spellings in tables.aliases.items()
        }
        self._by_key: dict[str, str] = {}
        for license_id, spellings in tables.aliases.items():
            for spelling in (license_id, *spellings):
                self._add(alias_key(spelling), license_id, spelling)

    def _add(self, key: str, license_id: str, spelling: str) -> None:
        if not key:
            raise ValueError(f"{license_id}: alias {spelling!r} has an empty key")
        existing = self._by_key.get(key)
        if existing is not None and existing != license_id:
            raise ValueError(
                f"alias {spelling!r} is ambiguous: {existing!r} and {license_id!r}"
            )
        self._by_key[key] = license_id

    @property
    def vocabulary(self) -> frozenset[str]:
        return self._vocabulary

    def aliases_by_license(self) -> dict[str, list[str]]:
        """Canonical license to its configured spellings"""
        return {
            license_id: sorted(spellings)
            for license_id, spellings in self._spellings.items()
        }

    def normalize(self, token: str) -> str | None:
        """Return the canonical identifier for *token* or None"""
        key = alias_key(token)
        if not key:
            return None
        license_id = self._by_key.get(key)
        if license_id is None:
            logger.debug("no alias for %r (key %r)", token, key)
        return license_id

    def __contains__(self, token: typing.Any) -> bool:
        return isinstance(token, str) and self.normalize(token) is not None

    def __len__(self) -> int:
        return len(self._by_key)
