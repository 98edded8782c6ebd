import logging

import pytest

from license_resolver import log
from license_resolver.packageinfo import PackageInfo


def _record(msg: str, *args: object) -> log.ResolverLogRecord:
    return log.ResolverLogRecord(
        "license_resolver.test", logging.INFO, __file__, 1, msg, args, None
    )


def test_without_package():
    assert _record("hello %s", "world").getMessage() == "hello world"


def test_with_package():
    with log.package_ctxvar_context(PackageInfo(name="jquery", version="3.7.1")):
        assert _record("hello %s", "world").getMessage() == "jquery-3.7.1: hello world"
    assert _record("hello").getMessage() == "hello"


def test_with_unnamed_package():
    with log.package_ctxvar_context(PackageInfo(licenses=("MIT",))):
        assert _record("hello").getMessage() == "hello"


def test_context_is_reset_on_error():
    with pytest.raises(RuntimeError):
        with log.package_ctxvar_context(PackageInfo(name="jquery")):
            raise RuntimeError("boom")
    with pytest.raises(LookupError):
        log.package_ctxvar.get()


