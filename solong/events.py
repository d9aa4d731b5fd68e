"""Window events, their masks, and per-window hook tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any, Callable, Optional, Union


class EventType(IntEnum):
    """Event type numbers as the X protocol defines them."""

    KEY_PRESS = 2
    KEY_RELEASE = 3
    BUTTON_PRESS = 4
    BUTTON_RELEASE = 5
    MOTION_NOTIFY = 6
    ENTER_NOTIFY = 7
    LEAVE_NOTIFY = 8
    FOCUS_IN = 9
    FOCUS_OUT = 10
    KEYMAP_NOTIFY = 11
    EXPOSE = 12
    GRAPHICS_EXPOSE = 13
    NO_EXPOSE = 14
    VISIBILITY_NOTIFY = 15
    CREATE_NOTIFY = 16
    DESTROY_NOTIFY = 17
    UNMAP_NOTIFY = 18
    MAP_NOTIFY = 19
    MAP_REQUEST = 20
    REPARENT_NOTIFY = 21
    CONFIGURE_NOTIFY = 22
    CONFIGURE_REQUEST = 23
    GRAVITY_NOTIFY = 24
    RESIZE_REQUEST = 25
    CIRCULATE_NOTIFY = 26
    CIRCULATE_REQUEST = 27
    PROPERTY_NOTIFY = 28
    SELECTION_CLEAR = 29
    SELECTION_REQUEST = 30
    SELECTION_NOTIFY = 31
    COLORMAP_NOTIFY = 32
    CLIENT_MESSAGE = 33
    MAPPING_NOTIFY = 34
    GENERIC_EVENT = 35


# One slot per event number below this bound.
MAX_EVENT = 36


class EventMask(IntFlag):
    """Event selection masks as the X protocol defines them."""

    NO_EVENT = 0
    KEY_PRESS = 1 << 0
    KEY_RELEASE = 1 << 1
    BUTTON_PRESS = 1 << 2
    BUTTON_RELEASE = 1 << 3
    ENTER_WINDOW = 1 << 4
    LEAVE_WINDOW = 1 << 5
    POINTER_MOTION = 1 << 6
    POINTER_MOTION_HINT = 1 << 7
    BUTTON1_MOTION = 1 << 8
    BUTTON2_MOTION = 1 << 9
    BUTTON3_MOTION = 1 << 10
    BUTTON4_MOTION = 1 << 11
    BUTTON5_MOTION = 1 << 12
    BUTTON_MOTION = 1 << 13
    KEYMAP_STATE = 1 << 14
    EXPOSURE = 1 << 15
    VISIBILITY_CHANGE = 1 << 16
    STRUCTURE_NOTIFY = 1 << 17
    RESIZE_REDIRECT = 1 << 18
    SUBSTRUCTURE_NOTIFY = 1 << 19
    SUBSTRUCTURE_REDIRECT = 1 << 20
    FOCUS_CHANGE = 1 << 21
    PROPERTY_CHANGE = 1 << 22
    COLORMAP_CHANGE = 1 << 23
    OWNER_GRAB_BUTTON = 1 << 24


HookFunc = Callable[..., Any]


@dataclass(frozen=True)
class Event:
    """An input or window event delivered to a window.

    ``keysym`` is used by key events, ``button`` by button events, ``x``
    and ``y`` by button and motion events, and ``count`` by expose events
    (the number of expose events still to follow).
    """

    type: int
    keysym: int = 0
    button: int = 0
    x: int = 0
    y: int = 0
    count: int = 0


@dataclass(frozen=True)
class Hook:
    """A callback bound to one event type, with its selection mask."""

    mask: int = 0
    func: Optional[HookFunc] = None
    param: Any = None


_UNDEFINED = frozenset({0, 1})
_KEY_EVENTS = frozenset({EventType.KEY_PRESS, EventType.KEY_RELEASE})
_BUTTON_EVENTS = frozenset({EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE})


class HookTable:
    """The hooks of one window, one slot per event type."""

    def __init__(self) -> None:
        self._hooks: list[Hook] = [Hook() for _ in range(MAX_EVENT)]

    @staticmethod
    def _slot(event: Union[int, EventType]) -> int:
        number = int(event)
        if not 0 <= number < MAX_EVENT:
            raise ValueError(f"event type must be in 0..{MAX_EVENT - 1}, got {number}")
        return number

    def set(
        self,
        event: Union[int, EventType],
        mask: int,
        func: Optional[HookFunc],
        param: Any = None,
    ) -> None:
        """Bind ``func`` to ``event``, replacing any earlier hook; None clears it."""
        self._hooks[self._slot(event)] = Hook(int(mask), func, param)

    def has(self, event: Union[int, EventType]) -> bool:
        """Tell whether a callback is bound to ``event``."""
        number = int(event)
        return 0 <= number < MAX_EVENT and self._hooks[number].func is not None

    def __getitem__(self, event: Union[int, EventType]) -> Hook:
        return self._hooks[self._slot(event)]

    def mask(self) -> EventMask:
        """Return the union of the masks of every slot."""
        combined = 0
        for hook in self._hooks:
            combined |= hook.mask
        return EventMask(combined)

    def dispatch(self, event: Event) -> Any:
        """Call the hook bound to the event's type with that type's arguments.

        Key hooks get ``(keysym, param)``, button hooks ``(button, x, y,
        param)``, motion hooks ``(x, y, param)`` and all others ``(param)``.
        Expose hooks run only for the last expose of a series. Returns the
        hook's result, or None when no hook ran.
        """
        number = int(event.type)
        if not 0 <= number < MAX_EVENT or number in _UNDEFINED:
            return None
        hook = self._hooks[number]
        if hook.func is None:
            return None
        if number in _KEY_EVENTS:
            return hook.func(event.keysym, hook.param)
        if number in _BUTTON_EVENTS:
            return hook.func(event.button, event.x, event.y, hook.param)
        if number == EventType.MOTION_NOTIFY:
            return hook.func(event.x, event.y, hook.param)
        if number == EventType.EXPOSE:
            if event.count:
                return None
            return hook.func(hook.param)
        return hook.func(hook.param)