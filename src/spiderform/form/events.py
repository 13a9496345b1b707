# Copyright 2026 SpiderForm Contributors
# SPDX-License-Identifier: Apache-2.0

"""Form lifecycle events and their dispatcher.

Listeners are plain callables taking a :class:`FormEvent`. They run in
descending priority; listeners of equal priority run in registration
order. A listener may replace the event data (e.g. to normalise submitted
values) or stop propagation to the remaining listeners.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class FormEvents(Enum):
    """Points in a form's lifecycle at which events are dispatched."""

    PRE_SET_DATA = "form.pre_set_data"
    POST_SET_DATA = "form.post_set_data"
    PRE_SUBMIT = "form.pre_submit"
    SUBMIT = "form.submit"
    POST_SUBMIT = "form.post_submit"
    VALIDATION_SUCCESS = "form.validation_success"
    VALIDATION_ERROR = "form.validation_error"


@dataclass
class FormEvent:
    """Payload passed to listeners.

    Attributes:
        form: The :class:`~spiderform.form.Form` the event belongs to.
        data: Event data; listeners of the ``PRE_*`` and ``SUBMIT`` events
            may replace it.
        context: Free-form values shared between listeners of one dispatch.
    """

    form: Any
    data: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    propagation_stopped: bool = False

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


Listener = Callable[[FormEvent], None]


@runtime_checkable
class EventSubscriber(Protocol):
    """Object registering several listeners at once.

    ``subscribed_events`` maps an event to a method name or to a
    ``(method name, priority)`` pair.
    """

    def subscribed_events(self) -> Mapping[FormEvents, str | tuple[str, int]]: ...


class EventDispatcher:
    """Registry of listeners per :class:`FormEvents` member."""

    def __init__(self) -> None:
        self._listeners: dict[FormEvents, list[tuple[int, int, Listener]]] = {}
        self._sequence = 0

    def add_listener(self, event: FormEvents, listener: Listener, priority: int = 0) -> EventDispatcher:
        """Register *listener* for *event*; higher priorities run first."""
        self._sequence += 1
        entries = self._listeners.setdefault(event, [])
        entries.append((-priority, self._sequence, listener))
        entries.sort(key=lambda entry: (entry[0], entry[1]))
        return self

    def remove_listener(self, event: FormEvents, listener: Listener) -> EventDispatcher:
        entries = self._listeners.get(event, [])
        self._listeners[event] = [entry for entry in entries if entry[2] != listener]
        return self

    def add_subscriber(self, subscriber: EventSubscriber) -> EventDispatcher:
        for event, spec in subscriber.subscribed_events().items():
            method, priority = (spec, 0) if isinstance(spec, str) else spec
            self.add_listener(event, getattr(subscriber, method), priority)
        return self

    def listeners(self, event: FormEvents) -> list[Listener]:
        return [entry[2] for entry in self._listeners.get(event, [])]

    def has_listeners(self, event: FormEvents | None = None) -> bool:
        if event is None:
            return any(self._listeners.values())
        return bool(self._listeners.get(event))

    def dispatch(self, event: FormEvents, payload: FormEvent) -> FormEvent:
        """Call the listeners of *event* until one stops propagation."""
        for listener in self.listeners(event):
            listener(payload)
            if payload.propagation_stopped:
                logger.debug("Propagation of %s stopped by %r", event.value, listener)
                break
        return payload

