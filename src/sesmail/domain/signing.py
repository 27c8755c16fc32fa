"""AWS Signature Version 4 request signing.

Pure functions: the canonical request, the string to sign, the chained
HMAC key derivation, and the resulting ``Authorization`` header are all
derived from explicit inputs, with the request timestamp supplied by the
caller so one clock capture covers both the signature scope and the
transmitted ``X-Amz-Date`` header.

Contents:
    * :class:`CanonicalRequest` - Normalized request representation.
    * :class:`SignatureResult` - Authorization header plus signing intermediates.
    * :class:`SignedRequest` - Headers and body ready for one transmission.
    * :func:`build_canonical_request` - Canonicalize a form POST.
    * :func:`derive_signing_key` - Four-stage HMAC-SHA256 key derivation.
    * :func:`sign` - Produce the authorization header.
    * :func:`build_signed_request` - Canonicalize, sign, and assemble headers.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Final
from urllib.parse import urlsplit

from .credentials import SigningCredentials

ALGORITHM: Final[str] = "AWS4-HMAC-SHA256"
FORM_CONTENT_TYPE: Final[str] = "application/x-www-form-urlencoded"
SIGNED_HEADER_NAMES: Final[str] = "content-type;host;x-amz-date"
TERMINATOR: Final[str] = "aws4_request"


@dataclass(frozen=True, slots=True)
class CanonicalRequest:
    """Normalized request whose SHA-256 hash goes into the string to sign."""

    method: str
    uri_path: str
    query_string: str
    canonical_headers: str
    signed_header_names: str
    payload_hash_hex: str

    def to_string(self) -> str:
        return "\n".join(
            (
                self.method,
                self.uri_path,
                self.query_string,
                self.canonical_headers,
                self.signed_header_names,
                self.payload_hash_hex,
            )
        )


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Authorization header with the intermediates used to compute it."""

    authorization_header: str
    amz_date: str
    credential_scope: str
    string_to_sign: str
    canonical_request_hash: str
    signature: str


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A signed POST, valid for a few minutes and meant to be sent exactly once."""

    url: str
    headers: MappingProxyType[str, str]
    body: bytes


def format_amz_date(timestamp: datetime) -> str:
    """Render ``timestamp`` in ISO-8601 basic format, UTC, whole seconds.

    Naive datetimes are taken to be UTC.

    Example:
        >>> format_amz_date(datetime(2015, 8, 30, 12, 36, 0, 999, tzinfo=timezone.utc))
        '20150830T123600Z'
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def build_canonical_request(method: str, url: str, body: bytes, timestamp: datetime) -> CanonicalRequest:
    """Canonicalize a form-encoded request for signing.

    Args:
        method: HTTP method, ``POST`` for every SES query action.
        url: Target URL with host and path.
        body: Exact bytes that will be transmitted.
        timestamp: The single clock capture for this signing operation.

    Returns:
        CanonicalRequest with the fixed ``content-type;host;x-amz-date`` header set.

    Raises:
        ValueError: When ``url`` has no host.

    Example:
        >>> req = build_canonical_request(
        ...     "POST", "https://email.eu-west-1.amazonaws.com/", b"", datetime(2024, 1, 2, tzinfo=timezone.utc)
        ... )
        >>> req.canonical_headers.splitlines()[1:]
        ['host:email.eu-west-1.amazonaws.com', 'x-amz-date:20240102T000000Z']
    """
    parts = urlsplit(url)
    if not parts.netloc:
        raise ValueError(f"URL has no host: {url!r}")
    canonical_headers = (
        f"content-type:{FORM_CONTENT_TYPE}\n"
        f"host:{parts.netloc}\n"
        f"x-amz-date:{format_amz_date(timestamp)}\n"
    )
    return CanonicalRequest(
        method=method.upper(),
        uri_path=parts.path or "/",
        query_string="",
        canonical_headers=canonical_headers,
        signed_header_names=SIGNED_HEADER_NAMES,
        payload_hash_hex=_sha256_hex(body),
    )


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """Derive the scoped signing key via four chained HMAC-SHA256 operations.

    Example:
        >>> derive_signing_key("wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY", "20120215", "us-east-1", "iam").hex()
        'f4780e2d9f65fa895f9c67b32ce1baf0b0d8a43505a000a1a9e090d414db404d'
    """
    k_date = _hmac(f"AWS4{secret_key}".encode(), date_stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, TERMINATOR)


def sign(canonical_request: CanonicalRequest, credentials: SigningCredentials, timestamp: datetime) -> SignatureResult:
    """Sign a canonical request with credentials scoped to ``timestamp``'s day.

    The same ``timestamp`` must have produced the canonical request's
    ``x-amz-date`` header and must be the value transmitted with the request.

    Args:
        canonical_request: Output of :func:`build_canonical_request`.
        credentials: Access key, secret, region, and service.
        timestamp: The single clock capture for this signing operation.

    Returns:
        SignatureResult holding the ``Authorization`` header value.
    """
    amz_date = format_amz_date(timestamp)
    date_stamp = amz_date[:8]
    credential_scope = f"{date_stamp}/{credentials.region}/{credentials.service}/{TERMINATOR}"
    canonical_request_hash = _sha256_hex(canonical_request.to_string().encode("utf-8"))
    string_to_sign = "\n".join((ALGORITHM, amz_date, credential_scope, canonical_request_hash))

    signing_key = derive_signing_key(credentials.secret_key, date_stamp, credentials.region, credentials.service)
    signature = hmac.new(signing_key, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

    authorization = (
        f"{ALGORITHM} Credential={credentials.access_key_id}/{credential_scope}, "
        f"SignedHeaders={canonical_request.signed_header_names}, Signature={signature}"
    )
    return SignatureResult(
        authorization_header=authorization,
        amz_date=amz_date,
        credential_scope=credential_scope,
        string_to_sign=string_to_sign,
        canonical_request_hash=canonical_request_hash,
        signature=signature,
    )


def build_signed_request(
    url: str,
    body: bytes,
    credentials: SigningCredentials,
    timestamp: datetime,
) -> SignedRequest:
    """Canonicalize, sign, and assemble the headers for one POST.

    One ``timestamp`` feeds the canonical headers, the credential scope,
    and the transmitted ``X-Amz-Date`` header.
    """
    canonical = build_canonical_request("POST", url, body, timestamp)
    result = sign(canonical, credentials, timestamp)
    headers = {
        "Content-Type": FORM_CONTENT_TYPE,
        "Host": urlsplit(url).netloc,
        "X-Amz-Date": result.amz_date,
        "Authorization": result.authorization_header,
    }
    return SignedRequest(url=url, headers=MappingProxyType(headers), body=body)


__all__ = [
    "ALGORITHM",
    "FORM_CONTENT_TYPE",
    "SIGNED_HEADER_NAMES",
    "CanonicalRequest",
    "SignatureResult",
    "SignedRequest",
    "build_canonical_request",
    "build_signed_request",
    "derive_signing_key",
    "format_amz_date",
    "sign",
]
