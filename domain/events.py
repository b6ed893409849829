# domain/events.py
"""
Transport lifecycle event kinds.
"""
from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple, Union

CONNECT = "connect"
SENT_HEADERS = "sentHeaders"
SENT_BODY_PART = "sentBodyPart"
RECEIVED_HEADERS = "receivedHeaders"
RECEIVED_BODY = "receivedBody"
DISCONNECT = "disconnect"

DEFAULT_OBSERVER_EVENTS: Tuple[str, ...] = (
    CONNECT,
    SENT_HEADERS,
    SENT_BODY_PART,
    RECEIVED_HEADERS,
    RECEIVED_BODY,
    DISCONNECT,
)

_DELIMITERS = re.compile(r"[ ,;]+")


def parse_observer_events(raw: Optional[Union[str, Iterable[str]]]) -> Tuple[str, ...]:
    """
    Split an event list on spaces, commas and semicolons.

    Names are kept verbatim, including ones the transport may not know about.
    An empty or missing list selects every default kind.
    """
    if raw is None:
        return DEFAULT_OBSERVER_EVENTS

    if isinstance(raw, str):
        tokens = [t for t in _DELIMITERS.split(raw) if t]
    else:
        tokens = []
        for item in raw:
            tokens.extend(t for t in _DELIMITERS.split(str(item)) if t)

    if not tokens:
        return DEFAULT_OBSERVER_EVENTS
    return tuple(tokens)
