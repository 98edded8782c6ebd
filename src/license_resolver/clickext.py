import os
import pathlib

import click

from .packageinfo import RegistryType


class ClickPath(click.Path):
    """ClickPath that returns pathlib.Path"""

    def convert(
        self,
        value: str | os.PathLike[str],
        param: click.core.Parameter | None,
        ctx: click.core.Context | None,
    ) -> pathlib.Path:
        path = super().convert(value=value, param=param, ctx=ctx)
        if isinstance(path, bytes):
            return pathlib.Path(os.fsdecode(path))
        return pathlib.Path(path)


class RegistryTypeParam(click.ParamType):
    """Registry type that returns a RegistryType"""

    name = "registry"

    def convert(
        self,
        value: str | RegistryType,
        param: click.core.Parameter | None,
        ctx: click.core.Context | None,
    ) -> RegistryType:
        if isinstance(value, RegistryType):
            return value
        try:
            return RegistryType(value.lower())
        except ValueError:
            self.fail(
                f"Invalid registry '{value}', allowed values are {[r.value for r in RegistryType]}",
                param,
                ctx,
            )
