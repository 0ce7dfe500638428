"""
Unbound Python SDK - Event Emitter

Minimal named-event dispatch used by streaming sessions. Handlers may be
plain callables or coroutine functions; coroutines are scheduled on the
running loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

logger = logging.getLogger("unbound.events")


EventHandler = Callable[..., Any]


class EventEmitter:
    """
    Register handlers with ``on``/``once`` and fire them with ``emit``.

    Example:
        >>> emitter = EventEmitter()
        >>> @emitter.on("ready")
        ... def handle_ready():
        ...     print("ready")
        >>> emitter.emit("ready")
        ready
        True
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._pending_tasks: Set[asyncio.Task] = set()

    def on(self, event: str, handler: Optional[EventHandler] = None) -> Any:
        """
        Add a handler. Usable directly or as a decorator.
        """
        if handler is None:
            def decorator(func: EventHandler) -> EventHandler:
                self.on(event, func)
                return func
            return decorator

        self._handlers.setdefault(event, []).append(handler)
        return handler

    def once(self, event: str, handler: Optional[EventHandler] = None) -> Any:
        """Add a handler that is removed after its first call."""
        if handler is None:
            def decorator(func: EventHandler) -> EventHandler:
                self.once(event, func)
                return func
            return decorator

        wrapper_called = False

        def wrapper(*args: Any) -> Any:
            nonlocal wrapper_called
            if wrapper_called:
                return None
            wrapper_called = True
            self.off(event, wrapper)
            return handler(*args)

        wrapper.listener = handler  # type: ignore[attr-defined]
        self.on(event, wrapper)
        return handler

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a handler registered with ``on`` or ``once``."""
        handlers = self._handlers.get(event, [])
        for registered in list(handlers):
            if registered is handler or getattr(registered, "listener", None) is handler:
                handlers.remove(registered)
                break
        if not handlers:
            self._handlers.pop(event, None)

    def listeners(self, event: str) -> List[EventHandler]:
        return list(self._handlers.get(event, []))

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def remove_all_listeners(self, event: Optional[str] = None) -> None:
        if event is None:
            self._handlers.clear()
        else:
            self._handlers.pop(event, None)

    def emit(self, event: str, *args: Any) -> bool:
        """
        Call every handler for ``event`` in registration order.

        Returns True if at least one handler was registered. Handler errors
        are logged and do not stop the remaining handlers.
        """
        handlers = self.listeners(event)
        for handler in handlers:
            try:
                result = handler(*args)
                if asyncio.iscoroutine(result):
                    task = asyncio.ensure_future(result)
                    self._pending_tasks.add(task)
                    task.add_done_callback(self._handler_done)
            except Exception as e:
                logger.error(f"Error in '{event}' event handler: {e}")
        return bool(handlers)

    def _handler_done(self, task: asyncio.Task) -> None:
        self._pending_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Error in event handler: {task.exception()}")
