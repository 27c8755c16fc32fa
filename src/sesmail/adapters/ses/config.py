"""SES configuration model and loader.

Provides the SesConfig Pydantic model for validated, immutable SES settings
and the loader function to create it from configuration dictionaries.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from email.utils import parseaddr
from typing import Any, cast

from btx_lib_mail import validate_email_address
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from sesmail.domain.credentials import DEFAULT_SERVICE, SigningCredentials

DEFAULT_REGION = "eu-west-1"
DEFAULT_ENDPOINT_DOMAIN = "amazonaws.com"

#: Conventional environment variables consulted when the layered config
#: leaves a key empty.
ENV_FALLBACKS: Mapping[str, str] = {
    "access_key_id": "AWS_SES_ACCESS_KEY_ID",
    "secret_access_key": "AWS_SES_SECRET_ACCESS_KEY",
    "region": "AWS_SES_REGION",
}


class SesConfig(BaseModel):
    """Validated, immutable SES configuration.

    Example:
        >>> config = SesConfig(access_key_id="AKID", secret_access_key="secret")
        >>> config.region
        'eu-west-1'
        >>> config.endpoint_url
        'https://email.eu-west-1.amazonaws.com/'
    """

    model_config = ConfigDict(frozen=True)

    access_key_id: str | None = None
    secret_access_key: str | None = None
    region: str = DEFAULT_REGION
    service: str = DEFAULT_SERVICE
    endpoint_domain: str = DEFAULT_ENDPOINT_DOMAIN
    from_address: str | None = None
    recipients: list[str] = Field(default_factory=list)
    brand_name: str = "World Music Method"
    timeout: float = 30.0

    @field_validator("recipients", mode="before")
    @classmethod
    def _coerce_string_to_list(cls, v: Any) -> list[str]:
        """Coerce single strings to single-element lists.

        Handles environment variables and .env files that provide single strings
        instead of TOML arrays. Empty strings become empty lists.

        Examples:
            >>> SesConfig._coerce_string_to_list("ops@example.com")
            ['ops@example.com']
            >>> SesConfig._coerce_string_to_list("")
            []
        """
        if isinstance(v, str):
            return [v] if v.strip() else []
        if isinstance(v, list):
            return cast(list[str], v)
        return []

    @field_validator("access_key_id", "secret_access_key", "from_address", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Coerce empty or whitespace-only strings to None.

        Treats empty strings from config files as "not configured" rather than
        explicit empty values, so a blank key never produces half-built
        credentials.
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("region", "service", "endpoint_domain", mode="before")
    @classmethod
    def _blank_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        """Fall back to the field default when a config layer leaves it blank."""
        if isinstance(v, str) and not v.strip():
            return cls.model_fields[cast(str, info.field_name)].default
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> SesConfig:
        """Validate configuration values.

        Raises:
            ValueError: When configuration values are invalid.

        Example:
            >>> SesConfig(timeout=-5.0)  # doctest: +IGNORE_EXCEPTION_DETAIL
            Traceback (most recent call last):
            ...
            ValidationError: ...
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        for label, value in (("region", self.region), ("endpoint_domain", self.endpoint_domain)):
            if any(ch.isspace() or ch in "/:@" for ch in value):
                raise ValueError(f"invalid {label}: {value!r}")

        if self.from_address is not None:
            _, addr = parseaddr(self.from_address)
            validate_email_address(addr or self.from_address)

        for recipient in self.recipients:
            validate_email_address(recipient)

        return self

    def __repr__(self) -> str:
        """Return string representation with the secret access key redacted.

        Example:
            >>> config = SesConfig(access_key_id="AKID", secret_access_key="secret123")
            >>> "secret123" in repr(config)
            False
            >>> "[REDACTED]" in repr(config)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name == "secret_access_key" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"SesConfig({', '.join(fields)})"

    __str__ = __repr__

    @property
    def is_configured(self) -> bool:
        return self.access_key_id is not None and self.secret_access_key is not None

    @property
    def endpoint_url(self) -> str:
        return endpoint_url(self.region, self.endpoint_domain)

    def signing_credentials(self) -> SigningCredentials | None:
        """Build SigningCredentials, or None when either key is missing.

        Example:
            >>> SesConfig().signing_credentials() is None
            True
            >>> SesConfig(access_key_id="AKID", secret_access_key="s").signing_credentials().region
            'eu-west-1'
        """
        if self.access_key_id is None or self.secret_access_key is None:
            return None
        return SigningCredentials(
            access_key_id=self.access_key_id,
            secret_key=self.secret_access_key,
            region=self.region,
            service=self.service,
        )


def endpoint_url(region: str, domain: str = DEFAULT_ENDPOINT_DOMAIN) -> str:
    """Return the regional SES query endpoint.

    Example:
        >>> endpoint_url("us-east-1")
        'https://email.us-east-1.amazonaws.com/'
    """
    return f"https://email.{region}.{domain}/"


def _apply_env_fallbacks(ses_raw: dict[str, Any], environ: Mapping[str, str]) -> None:
    for key, env_name in ENV_FALLBACKS.items():
        current = ses_raw.get(key)
        if isinstance(current, str) and current.strip():
            continue
        if current is not None and not isinstance(current, str):
            continue
        fallback = environ.get(env_name, "")
        if fallback.strip():
            ses_raw[key] = fallback


def load_ses_config_from_dict(
    config_dict: Mapping[str, Any],
    *,
    environ: Mapping[str, str] | None = None,
) -> SesConfig:
    """Load SesConfig from a configuration dictionary.

    Bridges lib_layered_config's dictionary output with the typed SesConfig
    Pydantic model. Keys the layered config leaves empty fall back to the
    conventional ``AWS_SES_*`` environment variables.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config.
            Expected to have a 'ses' section.
        environ: Environment mapping for the fallbacks. Defaults to ``os.environ``.

    Returns:
        Configured SES settings with defaults for missing values.

    Example:
        >>> cfg = load_ses_config_from_dict({"ses": {"region": "us-west-2"}}, environ={})
        >>> cfg.region, cfg.is_configured
        ('us-west-2', False)
        >>> cfg = load_ses_config_from_dict({}, environ={"AWS_SES_ACCESS_KEY_ID": "AKID",
        ...                                              "AWS_SES_SECRET_ACCESS_KEY": "s"})
        >>> cfg.is_configured
        True
    """
    ses_section: Any = config_dict.get("ses", {})

    if not isinstance(ses_section, Mapping):
        return SesConfig.model_validate(ses_section)

    ses_raw: dict[str, Any] = dict(cast(Mapping[str, Any], ses_section))
    _apply_env_fallbacks(ses_raw, os.environ if environ is None else environ)
    return SesConfig.model_validate(ses_raw)


__all__ = [
    "DEFAULT_ENDPOINT_DOMAIN",
    "DEFAULT_REGION",
    "SesConfig",
    "endpoint_url",
    "load_ses_config_from_dict",
]
