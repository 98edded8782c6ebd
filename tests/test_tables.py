import pathlib
import textwrap

import pytest

from license_resolver.aliases import AliasTable
from license_resolver.tables import Fingerprint, LicenseTables


def test_default_tables_are_cached():
    assert LicenseTables.default() is LicenseTables.default()


def test_default_tables_are_consistent(tables: LicenseTables):
    # every spelling maps to exactly one license
    alias_table = AliasTable(tables)
    assert len(alias_table) > len(tables.vocabulary)
    assert tables.known_urls
    assert tables.fingerprints
    assert {"MIT", "Apache-2.0", "BSD 2-Clause", "BSD 3-Clause"} <= tables.vocabulary


def test_from_string():
    tables = LicenseTables.from_string(
        textwrap.dedent("""
        aliases:
          MIT:
            - Expat
          CDDL-1.1:
        known_urls:
          https://example.com/LICENSE: MIT
        fingerprints:
          - license: MIT
            contains:
              - Permission is hereby granted
        """)
    )
    assert tables.vocabulary == {"MIT", "CDDL-1.1"}
    assert tables.aliases["CDDL-1.1"] == ()
    assert tables.known_urls == {"https://example.com/LICENSE": "MIT"}
    assert tables.fingerprints == (
        Fingerprint(license="MIT", contains=("Permission is hereby granted",)),
    )


def test_from_string_empty():
    tables = LicenseTables.from_string("")
    assert tables.vocabulary == frozenset()
    assert tables.fingerprints == ()


def test_from_string_not_a_dict():
    with pytest.raises(TypeError):
        LicenseTables.from_string("- MIT\n- ISC\n")


@pytest.mark.parametrize(
    "raw_yaml",
    [
        "known_urls:\n  https://example.com/LICENSE: MIT\n",
        "fingerprints:\n  - license: MIT\n    contains: [hello]\n",
        "aliases:\n  MIT: []\nfingerprints:\n  - license: MIT\n    contains: []\n",
        "unknown_key: 1\n",
    ],
)
def test_from_string_invalid(raw_yaml: str):
    with pytest.raises(RuntimeError, match="failed to load license tables"):
        LicenseTables.from_string(raw_yaml, source="test.yaml")


def test_from_file(tmp_path: pathlib.Path):
    tables_file = tmp_path / "tables.yaml"
    tables_file.write_text("aliases:\n  ISC:\n    - ISC License\n")
    tables = LicenseTables.from_file(tables_file)
    assert tables.vocabulary == {"ISC"}


def test_from_file_missing(tmp_path: pathlib.Path):
    with pytest.raises(FileNotFoundError):
        LicenseTables.from_file(tmp_path / "missing.yaml")


def test_merged(tables: LicenseTables):
    extra = Fingerprint(license="MIT", contains=("MIT-ish",))
    merged = tables.merged(
        aliases={"MIT": ["MIT-style"], "Custom-1.0": ["custom license"]},
        known_urls={"https://example.com/LICENSE": "Custom-1.0"},
        fingerprints=[extra],
    )
    assert merged.aliases["MIT"][-1] == "MIT-style"
    assert "Custom-1.0" in merged.vocabulary
    assert merged.known_urls["https://example.com/LICENSE"] == "Custom-1.0"
    assert merged.fingerprints[0] == extra
    assert merged.fingerprints[1:] == tables.fingerprints
    # the original tables are unchanged
    assert "Custom-1.0" not in tables.vocabulary
    assert "MIT-style" not in tables.aliases["MIT"]


def test_merged_unknown_license(tables: LicenseTables):
    with pytest.raises(ValueError):
        tables.merged(known_urls={"https://example.com/LICENSE": "Custom-1.0"})


def test_tables_are_immutable(tables: LicenseTables):
    with pytest.raises(ValueError):
        tables.fingerprints = ()  # type: ignore[misc]
