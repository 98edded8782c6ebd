"""Package metadata consumed by the license resolver

Registry clients (npm, bower, ...) live outside of this package. They hand
over a :class:`PackageInfo`, which the resolver treats as a read-only value.
"""

import typing
from collections.abc import Mapping
from enum import StrEnum

import pydantic
from pydantic import Field

# common settings
MODEL_CONFIG = pydantic.ConfigDict(
    # don't accept unknown keys
    extra="forbid",
    # all fields are immutable
    frozen=True,
    # read inline doc strings
    use_attribute_docstrings=True,
)


class RegistryType(StrEnum):
    NPM = "npm"
    BOWER = "bower"

    @property
    def metadata_file(self) -> str:
        """Name of the metadata file the registry reads licenses from"""
        if self is RegistryType.NPM:
            return "package.json"
        return "bower.json"


class PackageInfo(pydantic.BaseModel):
    """One version of a package as reported by a registry

    ::

      name: error-stack-parser
      version: 2.0.6
      source_connection_url: git://github.com/stacktracejs/error-stack-parser.git
      licenses:
        - SEE LICENSE IN LICENSE
      registry: npm
    """

    model_config = MODEL_CONFIG

    name: str = ""
    """Human readable package name"""

    version: str = ""
    """Version as reported by the registry, not necessarily PEP 440"""

    group_id: str = ""
    artifact_id: str = ""

    homepage: str = ""

    source_connection_url: str = ""
    """SCM connection URL, e.g. ``git://github.com/org/repo.git``"""

    licenses: tuple[str, ...] = ()
    """Raw license declarations in the order of the metadata file"""

    metadata: Mapping[str, str] = Field(default_factory=dict)
    """Arbitrary registry specific metadata"""

    registry: RegistryType = RegistryType.NPM

    @pydantic.field_validator("licenses", mode="before")
    @classmethod
    def before_licenses(cls, v: typing.Any) -> typing.Any:
        # a single string is a single declaration
        if isinstance(v, str):
            return (v,)
        if v is None:
            return ()
        return v

    def __str__(self) -> str:
        if self.version:
            return f"{self.name}-{self.version}"
        return self.name


class RegistryClient(typing.Protocol):
    """Interface of registry clients producing :class:`PackageInfo`"""

    def info(self, package_name: str, version: str | None = None) -> PackageInfo:
        pass
