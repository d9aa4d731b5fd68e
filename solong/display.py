"""A display connection holding windows, their pixels, hooks and event loop.

Windows keep their contents in memory. Unless the display is headless,
the most recently created window is also shown on screen through pygame,
and keyboard, mouse and close events from the screen are fed to it.
"""

from __future__ import annotations

import os
import sys
from array import array
from collections import deque
from typing import Any, Callable, Optional, Sequence, Union

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .colors import good_color, mask_shifts  # noqa: E402
from .events import Event, EventMask, EventType, HookTable  # noqa: E402
from .image import Image  # noqa: E402

_TYPECODE = next(code for code in ("I", "L") if array(code).itemsize == 4)

# A new window selects every event until the loop narrows the selection.
_ALL_EVENTS = 0xFFFFFF

_DEFAULT_FONT_SIZE = 13

_STRUCTURE = EventMask.STRUCTURE_NOTIFY | EventMask.SUBSTRUCTURE_NOTIFY
_MOTION = (
    EventMask.POINTER_MOTION
    | EventMask.BUTTON_MOTION
    | EventMask.BUTTON1_MOTION
    | EventMask.BUTTON2_MOTION
    | EventMask.BUTTON3_MOTION
    | EventMask.BUTTON4_MOTION
    | EventMask.BUTTON5_MOTION
)

# Masks that select each event type; types not listed are always delivered.
_SELECTED_BY: dict[int, int] = {
    EventType.KEY_PRESS: EventMask.KEY_PRESS,
    EventType.KEY_RELEASE: EventMask.KEY_RELEASE,
    EventType.BUTTON_PRESS: EventMask.BUTTON_PRESS,
    EventType.BUTTON_RELEASE: EventMask.BUTTON_RELEASE,
    EventType.MOTION_NOTIFY: _MOTION,
    EventType.ENTER_NOTIFY: EventMask.ENTER_WINDOW,
    EventType.LEAVE_NOTIFY: EventMask.LEAVE_WINDOW,
    EventType.FOCUS_IN: EventMask.FOCUS_CHANGE,
    EventType.FOCUS_OUT: EventMask.FOCUS_CHANGE,
    EventType.KEYMAP_NOTIFY: EventMask.KEYMAP_STATE,
    EventType.EXPOSE: EventMask.EXPOSURE,
    EventType.VISIBILITY_NOTIFY: EventMask.VISIBILITY_CHANGE,
    EventType.CREATE_NOTIFY: EventMask.SUBSTRUCTURE_NOTIFY,
    EventType.DESTROY_NOTIFY: _STRUCTURE,
    EventType.UNMAP_NOTIFY: _STRUCTURE,
    EventType.MAP_NOTIFY: _STRUCTURE,
    EventType.MAP_REQUEST: EventMask.SUBSTRUCTURE_REDIRECT,
    EventType.REPARENT_NOTIFY: _STRUCTURE,
    EventType.CONFIGURE_NOTIFY: _STRUCTURE,
    EventType.CONFIGURE_REQUEST: EventMask.SUBSTRUCTURE_REDIRECT,
    EventType.GRAVITY_NOTIFY: _STRUCTURE,
    EventType.RESIZE_REQUEST: EventMask.RESIZE_REDIRECT,
    EventType.CIRCULATE_NOTIFY: _STRUCTURE,
    EventType.CIRCULATE_REQUEST: EventMask.SUBSTRUCTURE_REDIRECT,
    EventType.PROPERTY_NOTIFY: EventMask.PROPERTY_CHANGE,
    EventType.COLORMAP_NOTIFY: EventMask.COLORMAP_CHANGE,
}

_POINTER_EVENTS = frozenset(
    {EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE, EventType.MOTION_NOTIFY}
)

# Screen key codes translated to the keysyms hooks expect.
_KEYSYMS: dict[int, int] = {
    pygame.K_ESCAPE: 0xFF1B,
    pygame.K_BACKSPACE: 0xFF08,
    pygame.K_TAB: 0xFF09,
    pygame.K_RETURN: 0xFF0D,
    pygame.K_DELETE: 0xFFFF,
    pygame.K_HOME: 0xFF50,
    pygame.K_LEFT: 0xFF51,
    pygame.K_UP: 0xFF52,
    pygame.K_RIGHT: 0xFF53,
    pygame.K_DOWN: 0xFF54,
    pygame.K_PAGEUP: 0xFF55,
    pygame.K_PAGEDOWN: 0xFF56,
    pygame.K_END: 0xFF57,
    pygame.K_LSHIFT: 0xFFE1,
    pygame.K_RSHIFT: 0xFFE2,
    pygame.K_LCTRL: 0xFFE3,
    pygame.K_RCTRL: 0xFFE4,
    pygame.K_LALT: 0xFFE9,
    pygame.K_RALT: 0xFFEA,
}
_KEYSYMS.update(
    {key: 0xFFBE + offset for offset, key in enumerate(
        (pygame.K_F1, pygame.K_F2, pygame.K_F3, pygame.K_F4, pygame.K_F5, pygame.K_F6,
         pygame.K_F7, pygame.K_F8, pygame.K_F9, pygame.K_F10, pygame.K_F11, pygame.K_F12)
    )}
)

_EXPOSE_EVENTS = frozenset(
    code for code in (
        getattr(pygame, "VIDEOEXPOSE", None),
        getattr(pygame, "WINDOWEXPOSED", None),
    ) if code is not None
)


class DisplayError(Exception):
    """Raised when the display or one of its windows cannot do what is asked."""


class Window:
    """A fixed-size window with its own pixels, font, pointer and hooks."""

    def __init__(self, display: "Display", width: int, height: int, title: str) -> None:
        self.display = display
        self.width = width
        self.height = height
        self.title = title
        self.hooks = HookTable()
        self.cursor_visible = True
        self._pixels = array(_TYPECODE, [0]) * (width * height)
        self._selected = _ALL_EVENTS
        self._pointer = (0, 0)
        self._font_name: Optional[str] = None
        self._font: Optional[Any] = None
        self._alive = True

    def __repr__(self) -> str:
        return f"Window({self.width}x{self.height}, {self.title!r})"

    @property
    def alive(self) -> bool:
        """True until the window is destroyed or its display closed."""
        return self._alive

    def _check(self) -> None:
        if not self._alive:
            raise DisplayError(f"window {self.title!r} has been destroyed")

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _selects(self, event_type: int) -> bool:
        required = _SELECTED_BY.get(event_type)
        return required is None or bool(self._selected & required)

    def _touch(self) -> None:
        self.display._dirty = True

    def clear(self) -> None:
        """Fill the window with the background pixel (black)."""
        self._check()
        self._pixels = array(_TYPECODE, [0]) * (self.width * self.height)
        self._touch()

    def pixel_put(self, x: int, y: int, color: int) -> None:
        """Draw one pixel of colour 0xRRGGBB; points outside are clipped."""
        self._check()
        if self._inside(x, y):
            self._pixels[y * self.width + x] = (
                self.display.color_value(color) & self.display._pixel_mask
            )
            self._touch()

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel value at column x, row y."""
        self._check()
        if not self._inside(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} window")
        return self._pixels[y * self.width + x]

    def _load_font(self) -> Any:
        if self._font is None:
            try:
                if not pygame.font.get_init():
                    pygame.font.init()
                self._font = pygame.font.Font(self._font_name, _DEFAULT_FONT_SIZE)
            except (OSError, NotImplementedError, pygame.error) as exc:
                raise DisplayError(f"cannot load font {self._font_name!r}: {exc}") from exc
        return self._font

    def string_put(self, x: int, y: int, color: int, text: str) -> None:
        """Draw ``text`` with its baseline at row y, starting at column x."""
        self._check()
        if not text:
            return
        font = self._load_font()
        rendered = font.render(text, False, (255, 255, 255), (0, 0, 0))
        top = y - font.get_ascent()
        value = self.display.color_value(color) & self.display._pixel_mask
        width, height = rendered.get_size()
        for row in range(height):
            py = top + row
            if not 0 <= py < self.height:
                continue
            for col in range(width):
                px = x + col
                if 0 <= px < self.width and rendered.get_at((col, row)).r > 127:
                    self._pixels[py * self.width + px] = value
        self._touch()

    def set_font(self, name: str) -> None:
        """Use the font file ``name`` for later :meth:`string_put` calls."""
        self._check()
        previous = (self._font_name, self._font)
        self._font_name, self._font = name, None
        try:
            self._load_font()
        except DisplayError:
            self._font_name, self._font = previous
            raise

    def put_image(self, image: Image, x: int, y: int) -> None:
        """Copy ``image`` into the window with its top-left corner at (x, y)."""
        self._check()
        x0, x1 = max(x, 0), min(x + image.width, self.width)
        y0, y1 = max(y, 0), min(y + image.height, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        source = array(_TYPECODE)
        source.frombytes(bytes(image.data))
        if (image.endian == 1) != (sys.byteorder == "big"):
            source.byteswap()
        mask = self.display._pixel_mask
        span = x1 - x0
        for dy in range(y0, y1):
            start = (dy - y) * image.width + (x0 - x)
            target = dy * self.width + x0
            self._pixels[target:target + span] = array(
                _TYPECODE, (value & mask for value in source[start:start + span])
            )
        self._touch()

    def hook(self, event: Union[int, EventType], mask: int,
             func: Optional[Callable[..., Any]], param: Any = None) -> None:
        """Bind ``func`` to any event type, with the mask that selects it."""
        self._check()
        self.hooks.set(event, mask, func, param)

    def key_hook(self, func: Optional[Callable[..., Any]], param: Any = None) -> None:
        """Call ``func(keysym, param)`` when a key is released."""
        self.hook(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, func, param)

    def mouse_hook(self, func: Optional[Callable[..., Any]], param: Any = None) -> None:
        """Call ``func(button, x, y, param)`` when a mouse button is pressed."""
        self.hook(EventType.BUTTON_PRESS, EventMask.BUTTON_PRESS, func, param)

    def expose_hook(self, func: Optional[Callable[..., Any]], param: Any = None) -> None:
        """Call ``func(param)`` when the window needs redrawing."""
        self.hook(EventType.EXPOSE, EventMask.EXPOSURE, func, param)

    def _is_front(self) -> bool:
        return self.display._screen is not None and self.display.front is self

    def mouse_move(self, x: int, y: int) -> None:
        """Move the pointer to (x, y) relative to the window."""
        self._check()
        self._pointer = (x, y)
        if self._is_front():
            pygame.mouse.set_pos((x, y))

    def mouse_pos(self) -> tuple[int, int]:
        """Return the pointer position relative to the window."""
        self._check()
        if self._is_front():
            self._pointer = tuple(pygame.mouse.get_pos())
        return self._pointer

    def mouse_hide(self) -> None:
        """Make the pointer invisible over the window."""
        self._check()
        self.cursor_visible = False
        if self._is_front():
            pygame.mouse.set_visible(False)

    def mouse_show(self) -> None:
        """Make the pointer visible again over the window."""
        self._check()
        self.cursor_visible = True
        if self._is_front():
            pygame.mouse.set_visible(True)


class Display:
    """A connection to a true-colour display and the windows opened on it.

    A headless display never touches the screen: events reach it only
    through :meth:`post`, so its loop returns once the queue runs dry and
    no loop hook is set.
    """

    def __init__(
        self,
        *,
        headless: bool = False,
        depth: int = 24,
        masks: Sequence[int] = (0xFF0000, 0x00FF00, 0x0000FF),
        screen_size: tuple[int, int] = (1920, 1080),
    ) -> None:
        if depth <= 0:
            raise DisplayError(f"invalid depth {depth}")
        try:
            self._shifts = mask_shifts(*masks)
        except (TypeError, ValueError) as exc:
            raise DisplayError("No TrueColor visual available") from exc
        self.headless = headless
        self.depth = depth
        self._pixel_mask = (1 << min(depth, 32)) - 1
        self._screen_size = screen_size
        self._windows: list[Window] = []
        self._queue: deque[tuple[Window, Event]] = deque()
        self._loop_hook: Optional[Callable[..., Any]] = None
        self._loop_param: Any = None
        self._end_loop = False
        self._closed = False
        self._dirty = False
        self._screen: Optional[Any] = None
        self._screen_ready = False
        if not headless:
            try:
                pygame.display.init()
            except pygame.error as exc:
                raise DisplayError(f"cannot open display: {exc}") from exc
            self._screen_ready = True

    def __enter__(self) -> "Display":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def windows(self) -> list[Window]:
        """The open windows, most recently created first."""
        return list(self._windows)

    @property
    def front(self) -> Optional[Window]:
        """The most recently created open window, if any."""
        return self._windows[0] if self._windows else None

    def _require_open(self) -> None:
        if self._closed:
            raise DisplayError("display is closed")

    def _owns(self, window: Window) -> bool:
        return any(open_window is window for open_window in self._windows)

    def _show(self, window: Window) -> None:
        if not self._screen_ready:
            return
        try:
            self._screen = pygame.display.set_mode((window.width, window.height))
        except pygame.error as exc:
            raise DisplayError(f"cannot show window: {exc}") from exc
        pygame.display.set_caption(window.title)
        pygame.mouse.set_visible(window.cursor_visible)
        self._dirty = True

    def _present(self) -> None:
        window = self.front
        if self._screen is None or window is None or not self._dirty:
            return
        surface = pygame.Surface(
            (window.width, window.height), 0, 32, (0xFF0000, 0xFF00, 0xFF, 0)
        )
        surface.get_buffer().write(window._pixels.tobytes(), 0)
        self._screen.blit(surface, (0, 0))
        pygame.display.flip()
        self._dirty = False

    def new_window(self, width: int, height: int, title: str) -> Window:
        """Open a window of fixed size; an expose event for it is queued."""
        self._require_open()
        if width <= 0 or height <= 0:
            raise DisplayError(f"window size must be positive, got {width}x{height}")
        window = Window(self, width, height, title)
        self._windows.insert(0, window)
        self._show(window)
        self._queue.append((window, Event(EventType.EXPOSE)))
        return window

    def destroy_window(self, window: Window) -> None:
        """Close ``window``; events still queued for it are dropped."""
        self._require_open()
        if not self._owns(window):
            raise DisplayError(f"{window!r} is not an open window of this display")
        was_front = self.front is window
        self._windows = [w for w in self._windows if w is not window]
        window._alive = False
        if was_front and self._windows:
            self._show(self._windows[0])

    def color_value(self, color: int) -> int:
        """Convert 0xRRGGBB to the pixel value of this display's visual."""
        return good_color(color, self.depth, self._shifts)

    def loop_hook(self, func: Optional[Callable[..., Any]], param: Any = None) -> None:
        """Call ``func(param)`` each time the loop has no event left to handle."""
        self._loop_hook = func
        self._loop_param = param

    def post(self, window: Window, event: Event) -> None:
        """Queue ``event`` for ``window``.

        A CLIENT_MESSAGE event stands for the window manager's request to
        close the window.
        """
        self._require_open()
        if not self._owns(window):
            raise DisplayError(f"{window!r} is not an open window of this display")
        if event.type in _POINTER_EVENTS:
            window._pointer = (event.x, event.y)
        self._queue.append((window, event))

    def _translate(self, raw: Any) -> None:
        window = self.front
        if window is None:
            return
        if raw.type == pygame.QUIT:
            event = Event(EventType.CLIENT_MESSAGE)
        elif raw.type in (pygame.KEYDOWN, pygame.KEYUP):
            kind = EventType.KEY_PRESS if raw.type == pygame.KEYDOWN else EventType.KEY_RELEASE
            event = Event(kind, keysym=_KEYSYMS.get(raw.key, raw.key))
        elif raw.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            kind = (EventType.BUTTON_PRESS if raw.type == pygame.MOUSEBUTTONDOWN
                    else EventType.BUTTON_RELEASE)
            event = Event(kind, button=raw.button, x=raw.pos[0], y=raw.pos[1])
        elif raw.type == pygame.MOUSEMOTION:
            event = Event(EventType.MOTION_NOTIFY, x=raw.pos[0], y=raw.pos[1])
        elif raw.type in _EXPOSE_EVENTS:
            self._dirty = True
            event = Event(EventType.EXPOSE)
        else:
            return
        self.post(window, event)

    def _poll(self) -> None:
        if self._screen is not None:
            for raw in pygame.event.get():
                self._translate(raw)

    def _pending(self) -> bool:
        self._poll()
        return bool(self._queue)

    def _next_event(self) -> Optional[tuple[Window, Event]]:
        while not self._queue:
            if self._screen is None or not self._windows:
                return None
            self._present()
            self._translate(pygame.event.wait())
        return self._queue.popleft()

    def _handle(self, window: Window, event: Event) -> None:
        if not self._owns(window):
            return
        if event.type == EventType.CLIENT_MESSAGE and window.hooks.has(EventType.DESTROY_NOTIFY):
            hook = window.hooks[EventType.DESTROY_NOTIFY]
            hook.func(hook.param)
        if self._owns(window) and window._selects(event.type):
            window.hooks.dispatch(event)

    def loop(self) -> None:
        """Dispatch events to window hooks until no window is left or the loop is ended."""
        self._require_open()
        for window in self._windows:
            window._selected = int(window.hooks.mask())
        while self._windows and not self._end_loop:
            while not self._end_loop and (self._loop_hook is None or self._pending()):
                item = self._next_event()
                if item is None:
                    self._present()
                    return
                self._handle(*item)
            self._present()
            if self._loop_hook is not None:
                self._loop_hook(self._loop_param)

    def loop_end(self) -> None:
        """Make the event loop stop before it handles anything more."""
        self._end_loop = True

    def flush_events(self) -> None:
        """Discard every pending event."""
        self._require_open()
        self._poll()
        self._queue.clear()

    def screen_size(self) -> tuple[int, int]:
        """Return the width and height of the screen."""
        self._require_open()
        if self._screen_ready:
            sizes = pygame.display.get_desktop_sizes()
            if sizes:
                return tuple(sizes[0])
        return self._screen_size

    def close(self) -> None:
        """Close every window and the display itself."""
        if self._closed:
            return
        for window in self._windows:
            window._alive = False
        self._windows.clear()
        self._queue.clear()
        if self._screen_ready:
            pygame.display.quit()
        self._screen = None
        self._screen_ready = False
        self._closed = True