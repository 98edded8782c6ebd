import importlib.metadata

import click

from . import github_detect, list_licenses, resolve

BUILTIN_COMMANDS: list[click.Command] = [
    github_detect.github_detect,
    list_licenses.list_licenses,
    resolve.resolve,
]


def _load_plugin_commands(builtin: list[click.Command]) -> list[click.Command]:
    """Load extra commands from license_resolver.cli entry points"""
    commands: list[click.Command] = []
    seen: dict[str, str] = {str(cmd.name): "builtin" for cmd in builtin}

    for ep in importlib.metadata.entry_points(group="license_resolver.cli"):
        try:
            command: click.Command | object = ep.load()
        except Exception as e:
            raise RuntimeError(
                f"Unable to load 'license_resolver.cli' entry point {ep.value!r}"
            ) from e

        if not isinstance(command, click.Command):
            raise RuntimeError(f"{ep.value!r} is not a click.Command: {command}")

        # the distribution's own entry points point at the builtin commands
        if command in builtin:
            continue

        if command.name in seen:
            raise ValueError(
                f"Conflict: {ep.value!r} and {seen[str(command.name)]!r} "
                f"define {command.name!r}"
            )
        commands.append(command)
        seen[str(command.name)] = ep.value

    return commands


commands = BUILTIN_COMMANDS + _load_plugin_commands(BUILTIN_COMMANDS)
