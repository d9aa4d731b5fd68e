import pytest

from solong.display import Display, DisplayError
from solong.events import Event, EventMask, EventType
from solong.image import Image

WIN1_SX = 242
WIN1_SY = 242
IM1_SX = 42
IM1_SY = 42


@pytest.fixture
def display():
    with Display(headless=True) as d:
        yield d


def color_map_1(win, w, h):
    for x in range(w):
        for y in range(h):
            color = (x * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)
            win.pixel_put(x, y, color)


def test_new_window_properties(display):
    win = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    assert (win.width, win.height, win.title) == (242, 242, "Title1")
    assert display.windows == [win]
    assert win.get_pixel(0, 0) == 0


def test_color_map_pixels(display):
    win = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    color_map_1(win, WIN1_SX, WIN1_SY)
    assert win.get_pixel(0, 0) == 0xFF0000
    assert win.get_pixel(241, 241) == 0x01FDFD


def test_clear_window(display):
    win = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    color_map_1(win, WIN1_SX, WIN1_SY)
    win.clear()
    assert win.get_pixel(0, 0) == 0
    assert win.get_pixel(241, 241) == 0


def test_pixel_put_clips_and_get_pixel_bounds(display):
    win = display.new_window(10, 10, "w")
    win.pixel_put(20, 3, 0xFFFFFF)
    win.pixel_put(-1, 3, 0xFFFFFF)
    assert all(win.get_pixel(x, 3) == 0 for x in range(10))
    with pytest.raises(IndexError):
        win.get_pixel(10, 0)


def test_put_image(display):
    win = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    img = Image(IM1_SX, IM1_SY)
    img.set_pixel(0, 0, display.color_value(0x123456))
    img.set_pixel(41, 41, display.color_value(0xABCDEF))
    win.put_image(img, 20, 20)
    assert win.get_pixel(20, 20) == 0x123456
    assert win.get_pixel(61, 61) == 0xABCDEF
    assert win.get_pixel(19, 19) == 0


def test_put_image_big_endian_and_clipping(display):
    win = display.new_window(10, 10, "w")
    img = Image(4, 4, endian=1)
    img.set_pixel(3, 3, 0xFF00FF)
    img.set_pixel(0, 0, 0x00FF00)
    win.put_image(img, -2, -2)
    assert win.get_pixel(1, 1) == 0xFF00FF
    win.put_image(img, 8, 8)
    assert win.get_pixel(8, 8) == 0x00FF00


def test_put_image_drops_bits_beyond_depth(display):
    win = display.new_window(4, 4, "w")
    img = Image(1, 1)
    img.set_pixel(0, 0, 0xFF000000)
    win.put_image(img, 0, 0)
    assert win.get_pixel(0, 0) == 0


def test_string_put(display):
    win = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    win.string_put(5, WIN1_SY // 2, 0xFF99FF, "String output")
    drawn = [
        (x, y) for y in range(WIN1_SY) for x in range(WIN1_SX)
        if win.get_pixel(x, y) == 0xFF99FF
    ]
    assert drawn
    assert all(y <= WIN1_SY // 2 + 5 for _, y in drawn)
    assert win.get_pixel(0, 0) == 0


def test_set_font_missing_file(display, tmp_path):
    win = display.new_window(10, 10, "w")
    with pytest.raises(DisplayError):
        win.set_font(str(tmp_path / "missing.ttf"))


def test_color_value_true_color(display):
    assert display.color_value(0xFF99FF) == 0xFF99FF


def test_color_value_depth_16():
    with Display(headless=True, depth=16, masks=(0xF800, 0x07E0, 0x001F)) as d:
        assert d.color_value(0xFFFFFF) == 0xFFFF
        assert d.color_value(0) == 0


def test_no_true_color_visual():
    with pytest.raises(DisplayError):
        Display(headless=True, masks=(0, 0x00FF00, 0x0000FF))


def test_hooks_in_loop(display):
    calls = []
    win1 = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    win1.expose_hook(lambda p: calls.append(("expose", p)), "e")
    win1.mouse_hook(lambda b, x, y, p: calls.append(("mouse", b, x, y)), None)
    win1.key_hook(lambda k, p: calls.append(("key", k)), None)
    display.post(win1, Event(EventType.BUTTON_PRESS, button=1, x=10, y=12))
    display.post(win1, Event(EventType.KEY_RELEASE, keysym=0x61))
    display.loop()
    assert calls == [("expose", "e"), ("mouse", 1, 10, 12), ("key", 0x61)]


def test_escape_destroys_third_window(display):
    win1 = display.new_window(WIN1_SX, WIN1_SY, "Title1")
    win3 = display.new_window(WIN1_SX, WIN1_SY, "Title3")

    def key_win3(key, param):
        if key == 0xFF1B:
            display.destroy_window(win3)

    win3.key_hook(key_win3, None)
    display.post(win3, Event(EventType.KEY_RELEASE, keysym=0xFF1B))
    display.loop()
    assert display.windows == [win1]
    assert not win3.alive
    with pytest.raises(DisplayError):
        win3.pixel_put(0, 0, 1)


def test_motion_hook(display):
    moves = []
    win3 = display.new_window(WIN1_SX, WIN1_SY, "Title3")
    win3.hook(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION,
              lambda x, y, p: moves.append((x, y)), None)
    display.post(win3, Event(EventType.MOTION_NOTIFY, x=7, y=9))
    display.loop()
    assert moves == [(7, 9)]
    assert win3.mouse_pos() == (7, 9)


def test_mouse_hook_replaces_window(display):
    state = {}
    log = []

    def gere_mouse(button, x, y, param):
        log.append(button)
        display.destroy_window(state["win1"])
        state["win1"] = display.new_window(123, 45, "new win")
        state["win1"].mouse_hook(gere_mouse, None)

    win1 = display.new_window(300, 300, "win1")
    win2 = display.new_window(600, 600, "win2")
    state["win1"] = win1
    win1.mouse_hook(gere_mouse, None)
    win2.mouse_hook(gere_mouse, None)
    display.post(win1, Event(EventType.BUTTON_PRESS, button=1, x=3, y=4))
    display.loop()
    new = state["win1"]
    assert log == [1]
    assert not win1.alive
    assert (new.width, new.height, new.title) == (123, 45, "new win")
    assert display.windows == [new, win2]


def test_expose_only_last_of_series(display):
    calls = []
    win = display.new_window(10, 10, "w")
    win.expose_hook(lambda p: calls.append(p), "x")
    display.post(win, Event(EventType.EXPOSE, count=2))
    display.post(win, Event(EventType.EXPOSE, count=0))
    display.loop()
    assert calls == ["x", "x"]


def test_unselected_event_not_delivered(display):
    calls = []
    win = display.new_window(10, 10, "w")
    win.hook(EventType.KEY_PRESS, 0, lambda k, p: calls.append(k), None)
    display.post(win, Event(EventType.KEY_PRESS, keysym=65))
    display.loop()
    assert calls == []


def test_selected_key_press_delivered(display):
    calls = []
    win = display.new_window(10, 10, "w")
    win.hook(EventType.KEY_PRESS, EventMask.KEY_PRESS, lambda k, p: calls.append((k, p)), "g")
    display.post(win, Event(EventType.KEY_PRESS, keysym=65307))
    display.loop()
    assert calls == [(65307, "g")]


def test_close_request_calls_destroy_hook(display):
    calls = []
    win = display.new_window(10, 10, "w")
    win.hook(EventType.DESTROY_NOTIFY, 0, lambda p: calls.append(p), "param")
    display.post(win, Event(EventType.CLIENT_MESSAGE))
    display.loop()
    assert calls == ["param"]


def test_events_for_destroyed_window_dropped(display):
    calls = []
    win1 = display.new_window(10, 10, "a")
    win2 = display.new_window(10, 10, "b")
    win2.key_hook(lambda k, p: calls.append(k), None)
    display.post(win2, Event(EventType.KEY_RELEASE, keysym=1))
    display.destroy_window(win2)
    display.loop()
    assert calls == []
    assert display.windows == [win1]


def test_loop_end_stops_dispatch(display):
    calls = []
    win = display.new_window(10, 10, "w")

    def on_key(key, param):
        calls.append(key)
        display.loop_end()

    win.key_hook(on_key, None)
    display.post(win, Event(EventType.KEY_RELEASE, keysym=1))
    display.post(win, Event(EventType.KEY_RELEASE, keysym=2))
    display.loop()
    assert calls == [1]
    assert display.windows == [win]
    assert win.alive
    display.loop()
    assert calls == [1]
    assert display.windows == [win]


def test_loop_hook_runs_until_windows_gone(display):
    counter = []
    win = display.new_window(10, 10, "w")

    def tick(param):
        counter.append(param)
        if len(counter) == 3:
            display.destroy_window(win)

    display.loop_hook(tick, "t")
    display.loop()
    assert counter == ["t", "t", "t"]
    assert display.windows == []


def test_flush_events(display):
    calls = []
    win = display.new_window(10, 10, "w")
    win.expose_hook(lambda p: calls.append(p), None)
    display.flush_events()
    display.loop()
    assert calls == []


def test_destroy_unknown_window(display):
    win = display.new_window(10, 10, "w")
    display.destroy_window(win)
    with pytest.raises(DisplayError):
        display.destroy_window(win)


def test_invalid_window_size(display):
    with pytest.raises(DisplayError):
        display.new_window(0, 10, "w")


def test_mouse_functions(display):
    win = display.new_window(50, 50, "w")
    assert win.mouse_pos() == (0, 0)
    win.mouse_move(12, 34)
    assert win.mouse_pos() == (12, 34)
    win.mouse_hide()
    assert win.cursor_visible is False
    win.mouse_show()
    assert win.cursor_visible is True


def test_screen_size():
    with Display(headless=True, screen_size=(800, 600)) as d:
        assert d.screen_size() == (800, 600)


def test_close_display():
    d = Display(headless=True)
    win = d.new_window(10, 10, "w")
    d.close()
    assert not win.alive
    with pytest.raises(DisplayError):
        d.new_window(10, 10, "x")
    with pytest.raises(DisplayError):
        win.clear()