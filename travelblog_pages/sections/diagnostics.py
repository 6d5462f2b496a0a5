"""Injectable diagnostic hook for the section pipeline.

The registry, filters, classifier, renderer, and composer never log on their
own. They describe notable events as :class:`DiagnosticEvent` values and hand
them to a ``DiagnosticSink`` supplied by the caller, who decides whether the
events go to the standard library logger, a test recorder, or nowhere.

Examples
--------
>>> sink = RecordingSink()
>>> sink(DiagnosticEvent(EventKind.TEMPLATE_UNRESOLVED, "no template", template_id="x"))
>>> [event.template_id for event in sink.events]
['x']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import logging
import typing as typ

LOGGER_NAME = "travelblog_pages"


class EventKind(enum.StrEnum):
    """Categories of notable pipeline events."""

    TEMPLATE_UNRESOLVED = "template_unresolved"
    KIND_UNKNOWN = "kind_unknown"
    SECTION_SUPPRESSED = "section_suppressed"
    SECTION_SKIPPED = "section_skipped"
    SECTION_FILTERED = "section_filtered"
    DUPLICATE_DROPPED = "duplicate_dropped"
    SECTION_FAILED = "section_failed"
    LAYOUT_DECIDED = "layout_decided"
    HEADINGS_EXTRACTED = "headings_extracted"


@dc.dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """A single notable event raised while rendering a post.

    Attributes
    ----------
    kind : EventKind
        Event category.
    message : str
        Short human-readable description.
    section_id : str or None
        Identifier of the section involved, when there is one.
    template_id : str or None
        Raw template identifier of the section involved.
    details : Mapping[str, Any]
        Extra structured values (layout name, heading count, error text).
    """

    kind: EventKind
    message: str
    section_id: str | None = None
    template_id: str | None = None
    details: typ.Mapping[str, typ.Any] = dc.field(default_factory=dict)


DiagnosticSink = cabc.Callable[[DiagnosticEvent], None]


def null_sink(event: DiagnosticEvent) -> None:  # noqa: ARG001
    """Discard ``event``."""
    return


class RecordingSink:
    """Keep every received event in memory."""

    def __init__(self) -> None:
        self.events: list[DiagnosticEvent] = []

    def __call__(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[DiagnosticEvent]:
        """Return the recorded events matching ``kind`` in arrival order."""
        return [event for event in self.events if event.kind is kind]


_LEVELS: dict[EventKind, int] = {
    EventKind.SECTION_FAILED: logging.ERROR,
    EventKind.TEMPLATE_UNRESOLVED: logging.WARNING,
    EventKind.KIND_UNKNOWN: logging.WARNING,
}


class LoggingSink:
    """Route events to the standard library ``logging`` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def __call__(self, event: DiagnosticEvent) -> None:
        level = _LEVELS.get(event.kind, logging.DEBUG)
        self.logger.log(
            level,
            "%s: %s (section=%s template=%s)",
            event.kind.value,
            event.message,
            event.section_id or "-",
            event.template_id or "-",
            extra={"details": dict(event.details)},
        )


__all__ = [
    "DiagnosticEvent",
    "DiagnosticSink",
    "EventKind",
    "LoggingSink",
    "RecordingSink",
    "null_sink",
]
