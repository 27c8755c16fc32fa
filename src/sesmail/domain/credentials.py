"""Signing credentials value object."""

from __future__ import annotations

from dataclasses import dataclass, field, fields

from .errors import ConfigurationError

DEFAULT_SERVICE = "ses"


@dataclass(frozen=True, slots=True)
class SigningCredentials:
    """Immutable SigV4 credentials, constructed once per process.

    Every field must be non-empty; a partially populated value cannot exist.
    The secret is excluded from ``repr`` so the value is safe to log.

    Example:
        >>> creds = SigningCredentials("AKIDEXAMPLE", "secret", "eu-west-1")
        >>> creds.service
        'ses'
        >>> "secret" in repr(creds)
        False
        >>> SigningCredentials("", "secret", "eu-west-1")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ConfigurationError: signing credentials missing: access_key_id
    """

    access_key_id: str
    secret_key: str = field(repr=False)
    region: str
    service: str = DEFAULT_SERVICE

    def __post_init__(self) -> None:
        missing = [f.name for f in fields(self) if not str(getattr(self, f.name)).strip()]
        if missing:
            raise ConfigurationError(f"signing credentials missing: {', '.join(missing)}")


def require_credentials(credentials: SigningCredentials | None) -> SigningCredentials:
    """Return ``credentials`` or raise when the email service is unconfigured.

    Raises:
        ConfigurationError: When ``credentials`` is None.
    """
    if credentials is None:
        raise ConfigurationError("email service not configured")
    return credentials


__all__ = ["DEFAULT_SERVICE", "SigningCredentials", "require_credentials"]
