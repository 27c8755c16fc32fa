"""In-memory SES transport for testing.

Provides a transport that satisfies the SendSignedRequest Protocol but
performs no network I/O. Outcomes are scripted per call.

Contents:
    * :class:`TransportSpy` - Records signed requests and replays scripted outcomes.
    * :class:`StaticInviteBuilder` - Returns a fixed invite (or None) for any event.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import parse_qs

from ...domain.calendar import CalendarAttachment, CalendarEvent
from ...domain.outcomes import SendOutcome, SendSuccess
from ...domain.signing import SignedRequest


def _empty_request_list() -> list[SignedRequest]:
    """Create an empty typed list for request records."""
    return []


def _empty_outcome_list() -> list[SendOutcome]:
    return []


@dataclass
class TransportSpy:
    """Captures signed requests for test assertions.

    Each test should create its own TransportSpy instance to avoid cross-test
    pollution. Outcomes queued in ``outcomes`` are returned in order; once the
    queue is empty every call succeeds with a generated message id.

    Attributes:
        calls: Signed requests received, in call order.
        outcomes: Scripted outcomes consumed front to back.
        timeouts: Timeout passed with each call.

    Example:
        >>> spy = TransportSpy()
        >>> spy.send(SignedRequest("https://email.eu-west-1.amazonaws.com/", {}, b"Action=SendEmail"))
        SendSuccess(message_id='spy-message-1')
        >>> len(spy.calls)
        1
    """

    calls: list[SignedRequest] = field(default_factory=_empty_request_list)
    outcomes: list[SendOutcome] = field(default_factory=_empty_outcome_list)
    timeouts: list[float] = field(default_factory=list)

    @classmethod
    def scripted(cls, outcomes: Sequence[SendOutcome]) -> TransportSpy:
        return cls(outcomes=list(outcomes))

    def clear(self) -> None:
        """Reset captured data for next test."""
        self.calls.clear()
        self.outcomes.clear()
        self.timeouts.clear()

    def send(self, request: SignedRequest, *, timeout: float = 30.0) -> SendOutcome:
        """Record the request and return the next scripted outcome."""
        self.calls.append(request)
        self.timeouts.append(timeout)
        if self.outcomes:
            return self.outcomes.pop(0)
        return SendSuccess(f"spy-message-{len(self.calls)}")

    def form(self, index: int) -> dict[str, str]:
        """Decode the form body of the ``index``-th call into a flat dict."""
        parsed = parse_qs(self.calls[index].body.decode("ascii"), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    @property
    def actions(self) -> list[str]:
        return [self.form(index)["Action"] for index in range(len(self.calls))]


@dataclass
class StaticInviteBuilder:
    """Invite builder returning ``content`` wrapped as an attachment, or None.

    Attributes:
        content: Bytes to return; None simulates a generation failure.
        events: Events received, in call order.
    """

    content: bytes | None = b"BEGIN:VCALENDAR\r\nMETHOD:REQUEST\r\nEND:VCALENDAR\r\n"
    events: list[CalendarEvent] = field(default_factory=list)

    def __call__(self, event: CalendarEvent, *, filename: str = "invite.ics") -> CalendarAttachment | None:
        self.events.append(event)
        if self.content is None:
            return None
        return CalendarAttachment(filename=filename, content=self.content, method=event.method)


__all__ = ["StaticInviteBuilder", "TransportSpy"]
