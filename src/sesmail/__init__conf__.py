"""Static package metadata surfaced to CLI commands and documentation.

Values here must stay in sync with ``pyproject.toml``; the metadata sync
tests fail when they drift.

Contents:
    * Module constants describing the distribution.
    * :func:`print_info` - Render the metadata block for the ``info`` command.
"""

from __future__ import annotations

from typing import Final

name: Final[str] = "sesmail"
title: Final[str] = "Signed transactional email over the Amazon SES query API"
version: Final[str] = "1.0.0"
homepage: Final[str] = "https://github.com/sesmail/sesmail"
author: Final[str] = "sesmail maintainers"
author_email: Final[str] = "maintainers@sesmail.dev"
shell_command: Final[str] = "sesmail"

#: Vendor, application, and slug identifiers used by lib_layered_config to
#: locate platform-specific configuration directories.
LAYEREDCONF_VENDOR: Final[str] = "sesmail"
LAYEREDCONF_APP: Final[str] = "sesmail"
LAYEREDCONF_SLUG: Final[str] = "sesmail"


def print_info() -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for sesmail:
        ...
    """
    fields = (
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    )
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))


__all__ = [
    "LAYEREDCONF_APP",
    "LAYEREDCONF_SLUG",
    "LAYEREDCONF_VENDOR",
    "author",
    "author_email",
    "homepage",
    "name",
    "print_info",
    "shell_command",
    "title",
    "version",
]
