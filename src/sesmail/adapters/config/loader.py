"""Layered configuration loading for sesmail.

Configuration is read once per ``(profile, start_dir)`` pair through
lib_layered_config, in precedence order defaults → app → host → user →
dotenv → env. Environment keys use the ``SESMAIL___<SECTION>__<KEY>`` form,
e.g. ``SESMAIL___SES__REGION=us-east-1``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from sesmail import __init__conf__


class ConfigLoaderProtocol(Protocol):
    """Loader callable that also exposes ``cache_clear``."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Reject profile names that are unsafe as directory components.

    Raises:
        ValueError: For empty, oversized, reserved, or path-traversing names.

    Examples:
        >>> validate_profile("staging")
        >>> validate_profile("../prod")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../prod
    """
    validate_profile_name(profile, max_length=DEFAULT_MAX_PROFILE_LENGTH if max_length is None else max_length)


def get_default_config_path() -> Path:
    """Return the bundled ``defaultconfig.toml`` that seeds every layer stack.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).with_name("defaultconfig.toml")


@lru_cache(maxsize=4)
def _read_layers(profile: str | None, start_dir: str | None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Load the layered configuration, validating ``profile`` first.

    Args:
        profile: Optional profile; inserts ``profile/<name>/`` into every layer path.
        start_dir: Directory that seeds ``.env`` discovery; defaults to the cwd.

    Returns:
        Immutable Config with provenance for every key.

    Example:
        >>> get_config().get("ses", default={}).get("region")
        'eu-west-1'
    """
    if profile is not None:
        validate_profile(profile)
    return _read_layers(profile, start_dir)


_get_config.cache_clear = _read_layers.cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
