"""
Logging event dispatcher - Implements EventDispatcher protocol.

Domain events are informational; this adapter records them in the
application log and forwards them to any registered listeners.
"""

import logging
from collections.abc import Callable
from dataclasses import asdict, is_dataclass

logger = logging.getLogger(__name__)


class LoggingEventDispatcher:
    """
    Implements EventDispatcher protocol via logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._listeners: list[Callable[[object], None]] = []

    def subscribe(self, listener: Callable[[object], None]) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: object) -> None:
        details = asdict(event) if is_dataclass(event) and not isinstance(event, type) else {}
        logger.info("[EVENT] %s %s", type(event).__name__, details)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s", type(event).__name__)
