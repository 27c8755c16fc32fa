"""SES HTTPS transport.

Issues one signed POST per call via httpx and classifies the XML response
into a SendOutcome. This is the boundary past which no exception escapes:
network failures, fault bodies, and malformed bodies all come back as
``SendFailure`` values.
"""

from __future__ import annotations

import logging
from xml.etree import ElementTree

import httpx

from sesmail.domain.errors import MalformedResponseError, ProtocolError, TransportError
from sesmail.domain.outcomes import UNKNOWN_ERROR_MESSAGE, SendFailure, SendOutcome, SendSuccess
from sesmail.domain.signing import SignedRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

# Keywords that may indicate sensitive data in exception messages
_SENSITIVE_KEYWORDS = frozenset(
    {
        "password",
        "credential",
        "secret",
        "token",
    }
)


def _sanitize_exception_message(exc: Exception) -> str:
    """Sanitize exception message to prevent credential exposure.

    Example:
        >>> _sanitize_exception_message(TransportError("Connection refused"))
        'Connection refused'
        >>> _sanitize_exception_message(TransportError("bad secret in header"))
        'Email delivery failed. Check SES configuration.'
    """
    message = str(exc).lower()
    if any(keyword in message for keyword in _SENSITIVE_KEYWORDS):
        return "Email delivery failed. Check SES configuration."
    return str(exc)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_text(root: ElementTree.Element, name: str) -> str | None:
    for element in root.iter():
        if _local_name(element.tag) == name and element.text and element.text.strip():
            return element.text.strip()
    return None


def parse_response(status_code: int, body: bytes | str) -> str:
    """Extract the MessageId from an SES response, or raise the matching error.

    Args:
        status_code: HTTP status of the response.
        body: Raw response body.

    Returns:
        The provider-assigned message id of a 2xx response.

    Raises:
        ProtocolError: Non-2xx response with a ``<Message>`` fault element.
        MalformedResponseError: Body is not XML (including an unknown declared
            encoding) or lacks the expected element.

    Example:
        >>> parse_response(200, "<SendEmailResponse><SendEmailResult>"
        ...                     "<MessageId>0102-abc</MessageId></SendEmailResult></SendEmailResponse>")
        '0102-abc'
    """
    try:
        root = ElementTree.fromstring(body)
    except (ElementTree.ParseError, LookupError, ValueError) as exc:
        raise MalformedResponseError(f"HTTP {status_code} response body is not XML") from exc

    if 200 <= status_code < 300:
        message_id = _find_text(root, "MessageId")
        if message_id is None:
            raise MalformedResponseError(f"HTTP {status_code} response has no MessageId element")
        return message_id

    message = _find_text(root, "Message")
    if message is None:
        raise MalformedResponseError(f"HTTP {status_code} response has no fault Message element")
    raise ProtocolError(message, code=_find_text(root, "Code"))


def _post(request: SignedRequest, *, timeout: float, client: httpx.Client | None) -> httpx.Response:
    """POST the signed request, mapping network failures to TransportError."""
    try:
        if client is not None:
            return client.post(request.url, content=request.body, headers=dict(request.headers))
        with httpx.Client(timeout=timeout) as own_client:
            return own_client.post(request.url, content=request.body, headers=dict(request.headers))
    except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        raise TransportError(str(exc) or type(exc).__name__) from exc


def send_signed_request(
    request: SignedRequest,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.Client | None = None,
) -> SendOutcome:
    """Submit a signed request once and classify the result.

    Args:
        request: Freshly signed request; never a cached one.
        timeout: httpx timeout in seconds, used when no client is supplied.
        client: Optional httpx client (tests pass one backed by MockTransport).

    Returns:
        SendSuccess with the MessageId, or SendFailure with the fault message,
        the network error text, or ``"unknown error"`` for malformed bodies.

    Side Effects:
        One HTTPS request. Logs the attempt at INFO and failures at WARNING/ERROR.
    """
    logger.info("Submitting SES request", extra={"url": request.url, "body_bytes": len(request.body)})

    try:
        response = _post(request, timeout=timeout, client=client)
    except TransportError as exc:
        message = _sanitize_exception_message(exc)
        logger.error("SES request failed before a response", extra={"url": request.url, "error": message})
        logger.debug("SES transport failure", exc_info=True)
        return SendFailure(message)

    try:
        message_id = parse_response(response.status_code, response.content)
    except ProtocolError as exc:
        logger.warning(
            "SES rejected request",
            extra={"status": response.status_code, "error": str(exc), "error_code": exc.code},
        )
        return SendFailure(str(exc), exc.code)
    except MalformedResponseError as exc:
        logger.warning("SES response not understood", extra={"status": response.status_code, "error": str(exc)})
        return SendFailure(UNKNOWN_ERROR_MESSAGE)

    logger.info("SES accepted message", extra={"message_id": message_id})
    return SendSuccess(message_id)


__all__ = [
    "DEFAULT_TIMEOUT",
    "parse_response",
    "send_signed_request",
]
