import pytest

from solong.colors import good_color, lookup_color, mask_shifts


def test_named_color_from_table():
    assert lookup_color("red") == 0xFF0000
    assert lookup_color("snow") == 0xFFFAFA


def test_lookup_is_case_insensitive():
    assert lookup_color("RED") == lookup_color("red")
    assert lookup_color("LightGreen") == 0x90EE90


def test_two_word_name_joined_with_space():
    assert lookup_color("dark", "red") == 0x8B0000
    assert lookup_color("dark", "red") == lookup_color("darkred")


def test_first_entry_wins_for_duplicate_names():
    assert lookup_color("dark slate") == 0x2F4F4F
    assert lookup_color("light", "goldenrod") == 0xFAFAD2


def test_none_is_transparent():
    assert lookup_color("None") == -1


def test_unknown_name_gives_zero():
    assert lookup_color("notacolour") == 0
    assert lookup_color("red", "nothing") == 0


def test_hex_spec():
    assert lookup_color("#ff8000") == 0xFF8000
    assert lookup_color("#00ff00", "ignored") == 0x00FF00


def test_hex_spec_stops_at_non_hex():
    assert lookup_color("#ab;") == 0xAB
    assert lookup_color("#zz") == 0


def test_gray_and_grey_agree():
    for level in range(101):
        assert lookup_color(f"gray{level}") == lookup_color(f"grey{level}")


def test_mask_shifts_truecolor():
    assert mask_shifts(0xFF0000, 0x00FF00, 0x0000FF) == (16, 8, 8, 8, 0, 8)


def test_mask_shifts_565():
    assert mask_shifts(0xF800, 0x07E0, 0x001F) == (11, 5, 5, 6, 0, 5)


@pytest.mark.parametrize("masks", [(0xF800, 0x07E0, 0x001F), (0x7C00, 0x03E0, 0x001F), (0xFF0000, 0xFF00, 0xFF)])
def test_mask_shifts_rebuild_masks(masks):
    shifts = mask_shifts(*masks)
    rebuilt = tuple(((1 << shifts[2 * i + 1]) - 1) << shifts[2 * i] for i in range(3))
    assert rebuilt == masks


def test_mask_shifts_rejects_empty_mask():
    with pytest.raises(ValueError):
        mask_shifts(0, 0xFF00, 0xFF)


@pytest.mark.parametrize("color", [0x000000, 0x123456, 0xFFFFFF, 0xFF99FF])
def test_deep_visual_keeps_color(color):
    assert good_color(color, 24, mask_shifts(0xF800, 0x07E0, 0x001F)) == color
    assert good_color(color, 32, (0, 0, 0, 0, 0, 0)) == color


def test_shallow_visual_with_full_channels_keeps_color():
    shifts = mask_shifts(0xFF0000, 0xFF00, 0xFF)
    assert good_color(0x123456, 16, shifts) == 0x123456


def test_shallow_visual_packs_primaries_into_masks():
    masks = (0xF800, 0x07E0, 0x001F)
    shifts = mask_shifts(*masks)
    assert good_color(0xFF0000, 16, shifts) == masks[0]
    assert good_color(0x00FF00, 16, shifts) == masks[1]
    assert good_color(0x0000FF, 16, shifts) == masks[2]
    assert good_color(0x000000, 16, shifts) == 0


def test_shallow_white_fills_all_bits():
    shifts = mask_shifts(0xF800, 0x07E0, 0x001F)
    assert good_color(0xFFFFFF, 16, shifts) == 0xFFFF