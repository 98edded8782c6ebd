import pytest

from license_resolver.aliases import AliasTable, alias_key
from license_resolver.tables import LicenseTables


@pytest.fixture
def alias_table(tables: LicenseTables) -> AliasTable:
    return AliasTable(tables)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("MIT", "mit"),
        ("BSD 2-Clause", "bsd2clause"),
        ("BSD-2-Clause", "bsd2clause"),
        ("bsd2clause", "bsd2clause"),
        ("GPLv2", "gpl2"),
        ("GPL-2.0", "gpl2"),
        ("GPL-2.0+", "gpl2+"),
        ("LGPL-2.1", "lgpl2.1"),
        ("Apache License, Version 2.0", "apache2"),
        ("The Unlicense", "unlicense"),
        ("", ""),
    ],
)
def test_alias_key(text: str, expected: str) -> None:
    assert alias_key(text) == expected


@pytest.mark.parametrize(
    "token,expected",
    [
        ("MIT", "MIT"),
        ("mit", "MIT"),
        ("MIT License", "MIT"),
        ("MIT/X11", "MIT"),
        ("The MIT License (MIT)", "MIT"),
        ("BSD 2-Clause", "BSD 2-Clause"),
        ("BSD-2-Clause", "BSD 2-Clause"),
        ("bsd2clause", "BSD 2-Clause"),
        ("New BSD License", "BSD 3-Clause"),
        ("BSD-3-Clause", "BSD 3-Clause"),
        ("GPLv2", "GPL-2.0"),
        ("GPLv3", "GPL-3.0"),
        ("GPL-3.0-or-later", "GPL-3.0"),
        ("LGPL-2.1+", "LGPL-2.1"),
        ("Apache 2", "Apache-2.0"),
        ("Apache License, Version 2.0", "Apache-2.0"),
        ("apache-2.0", "Apache-2.0"),
        ("OFL-1.1", "Openfont-1.1"),
        ("SIL Open Font License 1.1", "Openfont-1.1"),
        ("The Unlicense", "Unlicense"),
        ("Artistic-2.0", "Artistic-License-2.0"),
        ("public-domain", "Public Domain"),
    ],
)
def test_normalize(alias_table: AliasTable, token: str, expected: str) -> None:
    assert alias_table.normalize(token) == expected


@pytest.mark.parametrize(
    "token",
    [
        "foo",
        "",
        "   ",
        "SEE LICENSE IN LICENSE",
        "http://polymer.github.io/LICENSE.txt",
        "MIT AND BSD-3-Clause",
    ],
)
def test_normalize_unknown(alias_table: AliasTable, token: str) -> None:
    assert alias_table.normalize(token) is None


def test_normalize_is_idempotent(alias_table: AliasTable) -> None:
    for license_id in alias_table.vocabulary:
        assert alias_table.normalize(license_id) == license_id
    for spellings in alias_table.aliases_by_license().values():
        for spelling in spellings:
            once = alias_table.normalize(spelling)
            assert once is not None
            assert alias_table.normalize(once) == once


def test_vocabulary(alias_table: AliasTable) -> None:
    assert {"MIT", "BSD 2-Clause", "GPL-3.0", "Openfont-1.1"} <= alias_table.vocabulary
    # SPDX spelling is an alias, not part of the vocabulary
    assert "OFL-1.1" not in alias_table.vocabulary


def test_contains(alias_table: AliasTable) -> None:
    assert "bsd2clause" in alias_table
    assert "foo" not in alias_table
    assert None not in alias_table
    assert len(alias_table) > len(alias_table.vocabulary)


def test_ambiguous_alias() -> None:
    tables = LicenseTables(aliases={"MIT": ("Expat",), "ISC": ("expat",)})
    with pytest.raises(ValueError, match="ambiguous"):
        AliasTable(tables)


def test_empty_alias_key() -> None:
    tables = LicenseTables(aliases={"MIT": ("---",)})
    with pytest.raises(ValueError, match="empty key"):
        AliasTable(tables)


def test_aliases_by_license() -> None:
    tables = LicenseTables(aliases={"MIT": ("X11", "Expat"), "ISC": ()})
    assert AliasTable(tables).aliases_by_license() == {
        "MIT": ["Expat", "X11"],
        "ISC": [],
    }
