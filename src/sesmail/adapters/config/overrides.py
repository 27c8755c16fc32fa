"""``--set SECTION.KEY=VALUE`` overrides applied on top of the layered config."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Values produced by :func:`coerce_value`."""

OverrideTree = dict[str, dict[str, object]]


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One parsed ``--set`` argument."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue

    @property
    def dotted_key(self) -> str:
        return ".".join((self.section, *self.key_path))


def coerce_value(raw: str) -> CoercedValue:
    """Interpret ``raw`` as JSON when possible, otherwise keep the string.

    Examples:
        >>> coerce_value("45.5"), coerce_value("false"), coerce_value("us-east-1")
        (45.5, False, 'us-east-1')
        >>> coerce_value('["ops@example.com"]')
        ['ops@example.com']
        >>> coerce_value("")
        ''
    """
    if not raw:
        return raw
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError:
        return raw


def parse_override(raw: str) -> ConfigOverride:
    """Parse ``SECTION.KEY[.SUBKEY...]=VALUE``.

    The first ``=`` ends the key; the first ``.`` ends the section.

    Raises:
        ValueError: When ``=`` or the section dot is missing, or a path
            component is empty.

    Examples:
        >>> override = parse_override("ses.region=us-east-1")
        >>> override.section, override.key_path, override.value
        ('ses', ('region',), 'us-east-1')
        >>> parse_override("ses.timeout=10").value
        10
        >>> parse_override("region=us-east-1")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: Invalid override 'region=us-east-1': key must be SECTION.KEY
    """
    dotted, sep, value = raw.partition("=")
    if not sep:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")
    section, dot, rest = dotted.partition(".")
    if not dot:
        raise ValueError(f"Invalid override {raw!r}: key must be SECTION.KEY")
    key_path = tuple(rest.split("."))
    if not section or not all(key_path):
        raise ValueError(f"Invalid override {raw!r}: empty section or key component")
    return ConfigOverride(section=section, key_path=key_path, value=coerce_value(value))


def build_override_tree(overrides: Iterable[ConfigOverride]) -> OverrideTree:
    """Nest parsed overrides into the mapping ``Config.with_overrides`` expects.

    Raises:
        TypeError: When one override descends into a key another set to a scalar.

    Example:
        >>> build_override_tree([parse_override("ses.region=us-east-1"), parse_override("ses.timeout=5")])
        {'ses': {'region': 'us-east-1', 'timeout': 5}}
    """
    tree: OverrideTree = {}
    for override in overrides:
        node: dict[str, object] = tree.setdefault(override.section, {})
        for part in override.key_path[:-1]:
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                raise TypeError(f"{override.dotted_key}: {part!r} already holds {type(child).__name__}")
            node = cast("dict[str, object]", child)
        node[override.key_path[-1]] = override.value
    return tree


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Return ``config`` with the ``--set`` values merged in.

    Raises:
        ValueError: If any override is malformed.

    Examples:
        >>> cfg = Config({"ses": {"region": "eu-west-1"}}, {})
        >>> apply_overrides(cfg, ("ses.region=us-east-1",))["ses"]["region"]
        'us-east-1'
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config
    return config.with_overrides(build_override_tree(parse_override(raw) for raw in raw_overrides))


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "build_override_tree",
    "coerce_value",
    "parse_override",
]
