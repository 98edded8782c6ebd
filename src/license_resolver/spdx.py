"""Split SPDX-like license expressions into candidate tokens

Only flat disjunctions (``MIT OR Apache-2.0``) and comma separated lists are
supported. ``AND``, ``WITH`` and nested expressions are passed on as a single
opaque token.
"""

import re

# "OR" is case sensitive and must be surrounded by whitespace
_SPLIT_RE = re.compile(r"\s+OR\s+|,")


def _strip_parens(raw: str) -> str:
    """Remove one pair of parentheses enclosing the whole expression"""
    if not (raw.startswith("(") and raw.endswith(")")):
        return raw
    depth = 0
    for idx, char in enumerate(raw):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            # closing parenthesis before the end, e.g. "(A) OR (B)"
            if depth == 0 and idx != len(raw) - 1:
                return raw
    if depth != 0:
        return raw
    return raw[1:-1].strip()


def split(raw: str) -> list[str]:
    """Split a raw license declaration into tokens

    >>> split("(Apache-2.0 OR MIT)")
    ['Apache-2.0', 'MIT']
    >>> split("MIT, GPL-2.0")
    ['MIT', 'GPL-2.0']
    """
    expression = _strip_parens(raw.strip())
    return [token.strip() for token in _SPLIT_RE.split(expression) if token.strip()]
