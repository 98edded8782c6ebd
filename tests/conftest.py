import pathlib
import typing

import pytest
import requests
from click.testing import CliRunner

from license_resolver.detector import LicenseDetector
from license_resolver.packageinfo import PackageInfo, RegistryType
from license_resolver.tables import LicenseTables

TESTDATA_PATH = pathlib.Path(__file__).parent.absolute() / "testdata"


@pytest.fixture
def testdata_path() -> typing.Generator[pathlib.Path, None, None]:
    yield TESTDATA_PATH


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def tables() -> LicenseTables:
    return LicenseTables.default()


@pytest.fixture
def session() -> typing.Generator[requests.Session, None, None]:
    """Plain session without retries, HTTP is mocked by requests_mock"""
    with requests.Session() as s:
        yield s


@pytest.fixture
def detector(tables: LicenseTables, session: requests.Session) -> LicenseDetector:
    return LicenseDetector(tables, session=session)


@pytest.fixture
def empty_package_info() -> typing.Callable[..., PackageInfo]:
    """PackageInfo with nothing but licenses"""

    def make(licenses: typing.Iterable[str], **kwargs: typing.Any) -> PackageInfo:
        return PackageInfo(
            licenses=tuple(licenses), registry=RegistryType.BOWER, **kwargs
        )

    return make


@pytest.fixture
def cli_runner(
    tmp_path: pathlib.Path,
) -> typing.Generator[CliRunner, None, None]:
    """Click CLI runner"""
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=tmp_path):
        yield runner
