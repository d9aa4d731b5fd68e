import pytest

from solong.events import (
    MAX_EVENT,
    Event,
    EventMask,
    EventType,
    HookTable,
)


def _recorder(calls, result="done"):
    def hook(*args):
        calls.append(args)
        return result

    return hook


def test_key_press_by_raw_numbers_matches_enum():
    table = HookTable()
    calls = []
    table.set(2, 1 << 0, _recorder(calls), "game")
    assert table.has(EventType.KEY_PRESS)
    assert table.mask() == EventMask.KEY_PRESS
    result = table.dispatch(Event(EventType.KEY_PRESS, keysym=65307))
    assert result == "done"
    assert calls == [(65307, "game")]


def test_key_release_passes_keysym_and_param():
    table = HookTable()
    calls = []
    table.set(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, _recorder(calls), 7)
    table.dispatch(Event(EventType.KEY_RELEASE, keysym=65362))
    assert calls == [(65362, 7)]


@pytest.mark.parametrize("etype", [EventType.BUTTON_PRESS, EventType.BUTTON_RELEASE])
def test_button_hooks_get_button_and_position(etype):
    table = HookTable()
    calls = []
    table.set(etype, EventMask.BUTTON_PRESS, _recorder(calls), None)
    table.dispatch(Event(etype, button=3, x=10, y=20))
    assert calls == [(3, 10, 20, None)]


def test_motion_hook_gets_position():
    table = HookTable()
    calls = []
    table.set(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION, _recorder(calls), "p")
    table.dispatch(Event(EventType.MOTION_NOTIFY, x=5, y=6, button=9))
    assert calls == [(5, 6, "p")]


def test_expose_runs_only_for_last_of_series():
    table = HookTable()
    calls = []
    table.set(EventType.EXPOSE, EventMask.EXPOSURE, _recorder(calls), "w")
    assert table.dispatch(Event(EventType.EXPOSE, count=2)) is None
    assert calls == []
    assert table.dispatch(Event(EventType.EXPOSE, count=0)) == "done"
    assert calls == [("w",)]


def test_generic_event_gets_only_param():
    table = HookTable()
    calls = []
    table.set(17, 0, _recorder(calls), "game")
    table.dispatch(Event(EventType.DESTROY_NOTIFY, x=1, y=2))
    assert calls == [("game",)]
    assert table.mask() == EventMask.NO_EVENT


def test_unbound_event_is_ignored():
    table = HookTable()
    assert table.dispatch(Event(EventType.KEY_PRESS, keysym=1)) is None
    assert not table.has(EventType.KEY_PRESS)


@pytest.mark.parametrize("etype", [0, 1])
def test_undefined_types_never_dispatch(etype):
    table = HookTable()
    calls = []
    table.set(etype, 0, _recorder(calls), None)
    assert table.dispatch(Event(etype)) is None
    assert calls == []


def test_out_of_range_event_in_dispatch_is_ignored():
    table = HookTable()
    assert table.dispatch(Event(MAX_EVENT)) is None
    assert not table.has(MAX_EVENT)


@pytest.mark.parametrize("etype", [-1, MAX_EVENT, 100])
def test_set_rejects_out_of_range(etype):
    table = HookTable()
    with pytest.raises(ValueError):
        table.set(etype, 0, lambda *a: None, None)


def test_mask_is_union_of_all_masks():
    table = HookTable()
    table.set(EventType.KEY_PRESS, EventMask.KEY_PRESS, lambda *a: None, None)
    table.set(EventType.EXPOSE, EventMask.EXPOSURE, lambda *a: None, None)
    table.set(EventType.BUTTON_PRESS, EventMask.BUTTON_PRESS, lambda *a: None, None)
    mask = table.mask()
    assert mask == EventMask.KEY_PRESS | EventMask.EXPOSURE | EventMask.BUTTON_PRESS
    assert EventMask.KEY_RELEASE not in mask


def test_empty_table_has_no_mask():
    assert HookTable().mask() == 0


def test_set_replaces_and_none_clears():
    table = HookTable()
    first, second = [], []
    table.set(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, _recorder(first), 1)
    table.set(EventType.KEY_RELEASE, EventMask.KEY_RELEASE, _recorder(second), 2)
    table.dispatch(Event(EventType.KEY_RELEASE, keysym=4))
    assert first == []
    assert second == [(4, 2)]
    table.set(EventType.KEY_RELEASE, 0, None, None)
    assert not table.has(EventType.KEY_RELEASE)
    assert table.dispatch(Event(EventType.KEY_RELEASE, keysym=4)) is None
    assert table.mask() == 0


def test_hook_slot_reflects_set_values():
    table = HookTable()

    def func(*args):
        return args

    table.set(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION, func, "param")
    hook = table[EventType.MOTION_NOTIFY]
    assert hook.func is func
    assert hook.param == "param"
    assert hook.mask == EventMask.POINTER_MOTION


def test_tables_are_independent():
    one, two = HookTable(), HookTable()
    one.set(EventType.KEY_PRESS, EventMask.KEY_PRESS, lambda *a: None, None)
    assert one.has(EventType.KEY_PRESS)
    assert not two.has(EventType.KEY_PRESS)
    assert two.mask() == 0