import typing

if typing.TYPE_CHECKING:
    from .packageinfo import RegistryType


class LicenseResolutionError(Exception):
    """Base class for license resolution errors"""


class GitHubLicenseError(LicenseResolutionError):
    """GitHub has no usable license for a repository"""

    def __init__(self, slug: str, reason: str) -> None:
        super().__init__(f"{slug}: {reason}")
        self.slug = slug
        self.reason = reason


class NoResolvableLicenseError(LicenseResolutionError):
    """None of the declared licenses of a package could be resolved

    Raised when every token failed every strategy or when the package
    declares no license at all.
    """

    def __init__(
        self,
        message: str,
        *,
        registry: "RegistryType",
        source_connection_url: str,
        licenses: typing.Sequence[str],
    ) -> None:
        super().__init__(message)
        self.registry = registry
        self.source_connection_url = source_connection_url
        self.licenses = tuple(licenses)
