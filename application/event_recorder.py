# application/event_recorder.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from application.ports.http_client import TransportObserver
from application.ports.logger import LoggerPort
from domain.events import DEFAULT_OBSERVER_EVENTS


@dataclass(frozen=True)
class RecordedEvent:
    kind: str
    data: Dict[str, Any] = field(default_factory=dict)


class EventRecorder(TransportObserver):
    """
    Logs the transport lifecycle events whose kind is in ``events``.

    Starts disabled; a disabled recorder ignores every event. Kind names are
    not validated since the transport defines which kinds exist.
    """

    def __init__(
        self,
        logger: LoggerPort,
        events: Optional[Iterable[str]] = None,
        enabled: bool = False,
    ):
        self._logger = logger
        selected = tuple(events) if events is not None else ()
        self._events: FrozenSet[str] = frozenset(selected or DEFAULT_OBSERVER_EVENTS)
        self._enabled = enabled
        self.records: List[RecordedEvent] = []

    @property
    def events(self) -> FrozenSet[str]:
        return self._events

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def notify(self, kind: str, **data: Any) -> None:
        if not self._enabled or kind not in self._events:
            return
        self.records.append(RecordedEvent(kind=kind, data=dict(data)))
        self._logger.info("http.event", kind=kind, **data)
