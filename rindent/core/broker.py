"""
A synchronous publish/subscribe hub.

Widgets announce state changes, like preferences being saved or the editor
re-indenting a line, without holding references to whoever listens.

Subscriptions are kept per source, then per event name::

    {
        source_name: {
            event_name: [subscriber_funcs]
        }
    }
"""


from collections import defaultdict
from dataclasses import dataclass
from typing import Any
from typing import Callable


@dataclass
class Event(object):
    """A notification handed to every subscriber of its source and name."""
    source: str
    """Who sent it - SYSTEM, code_editor."""
    name: str
    """What happened - PREFERENCES_UPDATED, indent_applied, etc."""
    data: Any = None
    """Payload - an edit result, a cursor position, etc."""


DUMMY_EVENT = Event('', '')
"""Default argument for handlers that are also called directly, outside of an
emit."""

END_POINT = Callable[[Event], None]
"""The subscriber callables an event is forwarded to."""

_Subscriptions = dict[str, list[END_POINT]]

_SOURCES: dict[str, _Subscriptions] = {}


def register_source(source_name: str) -> None:
    """Make ``source_name`` known to the broker. Existing sources are kept."""
    _SOURCES.setdefault(source_name, defaultdict(list))


def register_subscriber(
        source_name: str,
        event_name: str,
        subscriber: END_POINT
) -> None:
    """
    Call ``subscriber`` for every ``event_name`` event emitted by
    ``source_name``. Registering the same callable twice is a no-op.

    Args:
        source_name (str): The emitting source, registered if unknown.
        event_name (str): The event to listen for.
        subscriber (END_POINT): Receives the ``Event``.
    """
    register_source(source_name)
    subscribers = _SOURCES[source_name][event_name]
    if subscriber in subscribers:
        return
    subscribers.append(subscriber)


def unregister_subscriber(
        source_name: str,
        event_name: str,
        subscriber: END_POINT
) -> None:
    subscribers = _SOURCES.get(source_name, {}).get(event_name, [])
    if subscriber in subscribers:
        subscribers.remove(subscriber)


def emit(event: Event) -> None:
    """
    Hand an event to its subscribers, in the order they registered.

    Args:
        event (Event): What to send.
    Raises:
        ValueError: If nothing registered ``event.source``.
    """
    if event.source not in _SOURCES:
        raise ValueError(f'Unknown event source {event.source!r}')

    # Subscribers may unregister while being called.
    for subscriber in list(_SOURCES[event.source][event.name]):
        subscriber(event)

