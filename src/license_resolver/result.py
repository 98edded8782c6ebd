"""Explicit success-or-failure values

Some lookups are chained: a GitHub slug is extracted from a URL first and
consumed by the license detector later. :class:`Result` carries either the
value or the exception that prevented it, so the consumer can re-raise the
original cause without re-wrapping it.
"""

from __future__ import annotations

import dataclasses
import typing

T = typing.TypeVar("T")
U = typing.TypeVar("U")


@dataclasses.dataclass(frozen=True, slots=True)
class Result(typing.Generic[T]):
    value: T | None = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("a result holds either a value or an error, not both")

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> Result[T]:
        return cls(error=error)

    @classmethod
    def of(cls, func: typing.Callable[[], T]) -> Result[T]:
        """Call *func* and capture its return value or exception"""
        try:
            return cls.ok(func())
        except Exception as err:
            return cls.failure(err)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def get(self) -> T:
        """Return the value or raise the stored exception unchanged"""
        if self.error is not None:
            raise self.error
        return typing.cast(T, self.value)

    def map(self, func: typing.Callable[[T], U]) -> Result[U]:
        if self.error is not None:
            return Result.failure(self.error)
        return Result.of(lambda: func(typing.cast(T, self.value)))

    def __repr__(self) -> str:
        if self.error is not None:
            return f"<Result failure {self.error!r}>"
        return f"<Result ok {self.value!r}>"
