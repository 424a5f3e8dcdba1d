import pytest

from dovirpu.utils import (
    ConversionMode,
    add_start_code_emulation_prevention_3_byte,
    clear_start_code_emulation_prevention_3_byte,
    compute_crc32,
    conversion_mode_from_int,
    nits_to_pq,
)


def test_nits_to_pq_peak_is_one():
    assert nits_to_pq(10000.0) == pytest.approx(1.0)


def test_nits_to_pq_is_monotonic():
    values = [nits_to_pq(n) for n in (0.0001, 0.01, 1.0, 100.0, 1000.0, 4000.0)]
    assert values == sorted(values)
    assert all(0.0 < v < 1.0 for v in values)


@pytest.mark.parametrize(
    "mode,expected",
    [
        (0, ConversionMode.LOSSLESS),
        (1, ConversionMode.TO_MEL),
        (2, ConversionMode.TO_81),
        (3, ConversionMode.TO_81),
        (4, ConversionMode.TO_84),
        (9, ConversionMode.LOSSLESS),
    ],
)
def test_conversion_mode_from_int(mode, expected):
    assert conversion_mode_from_int(mode) is expected


@pytest.mark.parametrize(
    "mode,text",
    [
        (0, "Lossless"),
        (1, "To MEL"),
        (2, "To 8.1"),
        (4, "To 8.4"),
    ],
)
def test_conversion_mode_display(mode, text):
    assert str(conversion_mode_from_int(mode)) == text


def test_clear_removes_escape_byte():
    data = bytes([5, 0, 0, 3, 1, 2])
    assert clear_start_code_emulation_prevention_3_byte(data) == bytes([5, 0, 0, 1, 2])


def test_clear_keeps_escape_at_start():
    data = bytes([0, 0, 3, 1])
    assert clear_start_code_emulation_prevention_3_byte(data) == data


def test_clear_short_input_unchanged():
    assert clear_start_code_emulation_prevention_3_byte(b"\x03") == b"\x03"
    assert clear_start_code_emulation_prevention_3_byte(b"") == b""


def test_add_inserts_escape():
    data = bytes([1, 2, 3, 0, 0, 1, 5, 6])
    assert add_start_code_emulation_prevention_3_byte(data) == bytes(
        [1, 2, 3, 0, 0, 3, 1, 5, 6]
    )


@pytest.mark.parametrize(
    "data",
    [
        bytes([1, 2, 3, 0, 0, 1, 5, 6]),
        bytes([9, 9, 9, 0, 0, 3, 7, 7, 7]),
        bytes([4, 4, 4, 4, 4]),
    ],
)
def test_escape_round_trip(data):
    escaped = add_start_code_emulation_prevention_3_byte(data)
    assert clear_start_code_emulation_prevention_3_byte(escaped) == data


def test_crc32_mpeg2_check_value():
    assert compute_crc32(b"123456789") == 0x0376E6E7


def test_crc32_empty_is_initial_value():
    assert compute_crc32(b"") == 0xFFFFFFFF