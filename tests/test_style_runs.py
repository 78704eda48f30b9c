import pytest

from styled_text.style import (
    NO_COLOR,
    PLAIN,
    StyleFlags,
    StyleRun,
    StyleRunArray,
    next_capacity,
)


def make_array(*flags: int) -> StyleRunArray:
    runs = StyleRunArray(len(flags))
    for index, value in enumerate(flags):
        runs.set_flags_at(index, value)
    return runs


def flags_of(runs: StyleRunArray) -> list[int]:
    return [run.flags for run in runs]


@pytest.mark.parametrize(
    ("length", "capacity", "expected"),
    [
        (0, 0, 0),
        (5, 0, 10),
        (11, 10, 22),
        (5, 10, 10),
        (3, 10, 10),
        (0, 50, 0),
        (40, 200, 100),
        (60, 200, 200),
    ],
)
def test_next_capacity_policy(length: int, capacity: int, expected: int) -> None:
    assert next_capacity(length, capacity) == expected


def test_constructor_fills_every_run() -> None:
    runs = StyleRunArray(5, StyleFlags.BOLD)

    assert len(runs) == 5
    assert runs.capacity == 10
    assert flags_of(runs) == [StyleFlags.BOLD] * 5


def test_resize_keeps_prefix_and_tail() -> None:
    runs = make_array(1, 2, 4, 8)

    runs.resize(1, 2, 3)

    assert flags_of(runs) == [1, 0, 0, 0, 8]


def test_resize_reallocation_keeps_content() -> None:
    runs = make_array(1, 2)
    assert runs.capacity == 4

    runs.insert(1, 5)

    assert runs.capacity == 14
    assert flags_of(runs) == [1, 0, 0, 0, 0, 0, 2]


def test_truncate_shrinks_large_buffers() -> None:
    runs = StyleRunArray(150)
    assert runs.capacity == 300

    runs.truncate(20)
    assert runs.capacity == 150

    runs.truncate(10)
    assert runs.capacity == 75
    assert len(runs) == 10


def test_clear_releases_storage() -> None:
    runs = StyleRunArray(8, StyleFlags.ITALIC)

    runs.clear()

    assert len(runs) == 0
    assert runs.capacity == 0


def test_copy_from_overlapping_self() -> None:
    runs = make_array(1, 2, 4, 8)

    runs.copy_from(1, 3, runs, 0)

    assert flags_of(runs) == [1, 1, 2, 4]


def test_flags_are_masked_to_known_styles() -> None:
    runs = StyleRunArray(1)

    runs.set_flags_at(0, 0xFF)

    assert runs.flags_at(0) == StyleFlags.ALL_STYLES


def test_run_equality_ignores_color_without_flag() -> None:
    assert StyleRun(StyleFlags.BOLD, 0xFF123456) == StyleRun(StyleFlags.BOLD)
    assert StyleRun(StyleFlags.COLOR, 0xFF123456) != StyleRun(StyleFlags.COLOR, 0xFF000000)
    assert StyleRun() == PLAIN


def test_out_of_range_access_raises() -> None:
    runs = StyleRunArray(2)

    with pytest.raises(IndexError):
        runs.run_at(2)
    with pytest.raises(IndexError):
        runs.fill(1, 2, StyleFlags.BOLD, NO_COLOR)


def test_colors_serialize_little_endian() -> None:
    runs = StyleRunArray(1)
    runs.set_color_at(0, 0xFF112233)

    assert runs.colors_bytes() == b"\x33\x22\x11\xff"

    restored = StyleRunArray(1)
    restored.load_bytes(runs.flags_bytes(), runs.colors_bytes())
    assert restored.color_at(0) == 0xFF112233


def test_load_bytes_rejects_length_mismatch() -> None:
    runs = StyleRunArray(2)

    with pytest.raises(ValueError):
        runs.load_bytes(b"\x00", b"\x00" * 8)


def test_swap_exchanges_buffers() -> None:
    left = make_array(1, 2)
    right = StyleRunArray(3, StyleFlags.UNDERLINE)

    left.swap(right)

    assert flags_of(left) == [StyleFlags.UNDERLINE] * 3
    assert flags_of(right) == [1, 2]
    assert (left.capacity, right.capacity) == (6, 4)
