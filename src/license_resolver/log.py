import contextlib
import contextvars
import logging
import typing

from .packageinfo import PackageInfo

TERSE_LOG_FMT = "%(message)s"
VERBOSE_LOG_FMT = "%(asctime)s %(levelname)s:%(name)s:%(lineno)d: %(message)s"

package_ctxvar: contextvars.ContextVar[PackageInfo] = contextvars.ContextVar(
    "package"
)


@contextlib.contextmanager
def package_ctxvar_context(
    package_info: PackageInfo,
) -> typing.Generator[None, None, None]:
    """Context manager for package_ctxvar"""
    token = package_ctxvar.set(package_info)
    try:
        yield None
    finally:
        package_ctxvar.reset(token)


class ResolverLogRecord(logging.LogRecord):
    """Logger record factory to add the package from context var

    The class prepends f"{name}-{version}: " to every log message
    if-and-only-if ``package_ctxvar`` is set for the current context and
    the package has a name. Worker threads do not inherit context vars,
    tasks submitted to an executor have to run in a copied context.

    ::
        logging.setLogRecordFactory(ResolverLogRecord)
        with package_ctxvar_context(package_info):
            detector.resolve_licenses(package_info)
    """

    def getMessage(self) -> str:  # noqa: N802
        msg = super().getMessage()
        try:
            package_info = package_ctxvar.get()
        except LookupError:
            return msg
        label = str(package_info)
        if not label:
            return msg
        return f"{label}: {msg}"
