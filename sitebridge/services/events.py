"""
Event dispatch for sitebridge

Listeners are called in registration order. A failing listener is logged and
never blocks request processing.
"""
from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Fired with the resolved Site once per request
SITE_FOUND = "site.found"


class EventDispatcher:
    """In-process event dispatcher."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[[Any], Any]]] = defaultdict(list)

    def listen(self, event: str, listener: Callable[[Any], Any]) -> None:
        """Subscribe ``listener`` to ``event``; sync and async callables are accepted."""
        self._listeners[event].append(listener)

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    async def dispatch(self, event: str, payload: Any) -> list[Any]:
        """
        Call every listener of ``event`` with ``payload``.

        Returns:
            List of return values from each listener (None for failures).
        """
        results: list[Any] = []
        for listener in self._listeners.get(event, []):
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    result = await result
                results.append(result)
            except Exception as exc:
                logger.warning("Listener %r for %s raised: %s", listener, event, exc)
                results.append(None)
        return results
