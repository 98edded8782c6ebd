"""User visible messages

The resolver never branches on message text. Applications with their own
localization pass any callable matching :class:`Messages`.
"""

import typing
from collections.abc import Mapping

DEFAULT_MESSAGES: Mapping[str, str] = {
    "licensenotfound": (
        "The license could not be determined. Please file an issue or pull "
        "request on the project adding a valid license to the {0} file. "
        "Source: {1}. Declared licenses: {2}"
    ),
}


class Messages(typing.Protocol):
    def __call__(self, key: str, *args: typing.Any) -> str:
        pass


class MessageCatalog:
    """Format messages from a key to template mapping

    Templates use positional ``str.format`` fields. Unknown keys render as
    the key itself.
    """

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self._messages = dict(DEFAULT_MESSAGES)
        if messages:
            self._messages.update(messages)

    def __call__(self, key: str, *args: typing.Any) -> str:
        template = self._messages.get(key)
        if template is None:
            return key
        return template.format(*args)
