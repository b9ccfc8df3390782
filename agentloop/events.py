"""
Diagnostic Events
=================

Failures the session recovers from locally (a provider that will not
start, a tool name the model invented, a tool call that errors, a
knowledge base that cannot be read) never reach the task result. Each
one is recorded here as a structured event, and logged, so callers and
tests can see what was skipped:

    agent.events
    # (DiagnosticEvent(kind=EventKind.TOOL_NOT_FOUND,
    #                  fields={'tool_call_id': 'call_1', 'tool_name': 'missing'}),)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from agentloop.utils.logger import Logger

logger = Logger("Events")


class EventKind(str, Enum):
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    TOOL_SHADOWED = "tool_shadowed"
    TOOL_NOT_FOUND = "tool_not_found"
    TOOL_CALL_FAILED = "tool_call_failed"
    RETRIEVAL_FAILED = "retrieval_failed"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: EventKind
    fields: dict[str, Any] = field(default_factory=dict)


class EventLog:
    """Append-only list of diagnostic events for one session."""

    def __init__(self):
        self._events: list[DiagnosticEvent] = []

    def record(self, kind: EventKind, **fields: Any) -> DiagnosticEvent:
        event = DiagnosticEvent(kind=kind, fields=fields)
        self._events.append(event)
        logger.warning(kind.value, fields)
        return event

    @property
    def events(self) -> tuple[DiagnosticEvent, ...]:
        return tuple(self._events)

    def of_kind(self, kind: EventKind) -> list[DiagnosticEvent]:
        return [event for event in self._events if event.kind == kind]

    def __len__(self) -> int:
        return len(self._events)
