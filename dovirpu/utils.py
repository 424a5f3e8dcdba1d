"""Shared helpers: PQ conversion, emulation prevention, CRC and conversion modes."""

from __future__ import annotations

from enum import Enum

ST2084_Y_MAX = 10000.0
ST2084_M1 = 2610.0 / 16384.0
ST2084_M2 = (2523.0 / 4096.0) * 128.0
ST2084_C1 = 3424.0 / 4096.0
ST2084_C2 = (2413.0 / 4096.0) * 32.0
ST2084_C3 = (2392.0 / 4096.0) * 32.0

NUM_COMPONENTS = 3

FEL_STR = "FEL"
MEL_STR = "MEL"

_CRC32_MPEG2_POLY = 0x04C11DB7


class DoviError(Exception):
    """Raised when metadata is malformed, invalid or cannot be processed."""


class ConversionMode(Enum):
    """How an RPU should be converted."""

    LOSSLESS = 0
    TO_MEL = 1
    TO_81 = 2
    TO_84 = 3

    def __str__(self) -> str:
        return _CONVERSION_LABELS[self]


_CONVERSION_LABELS = {
    ConversionMode.LOSSLESS: "Lossless",
    ConversionMode.TO_MEL: "To MEL",
    ConversionMode.TO_81: "To 8.1",
    ConversionMode.TO_84: "To 8.4",
}


def conversion_mode_from_int(mode: int) -> ConversionMode:
    """Map a numeric mode to a ConversionMode; unknown values mean lossless."""
    if mode == 1:
        return ConversionMode.TO_MEL
    if mode in (2, 3):
        return ConversionMode.TO_81
    if mode == 4:
        return ConversionMode.TO_84
    return ConversionMode.LOSSLESS


def nits_to_pq(nits: float) -> float:
    """Convert a luminance in nits (cd/m2) to a normalised PQ value."""
    y = nits / ST2084_Y_MAX
    y_m1 = y**ST2084_M1
    return ((ST2084_C1 + ST2084_C2 * y_m1) / (1.0 + ST2084_C3 * y_m1)) ** ST2084_M2


def clear_start_code_emulation_prevention_3_byte(data: bytes) -> bytes:
    """Remove emulation prevention bytes (0x00 0x00 0x03) from Annex B data."""
    last_allowed = len(data) - 2
    return bytes(
        value
        for index, value in enumerate(data)
        if not (
            2 < index < last_allowed
            and data[index - 2] == 0
            and data[index - 1] == 0
            and value == 3
        )
    )


def add_start_code_emulation_prevention_3_byte(data: bytes) -> bytes:
    """Return the data with emulation prevention bytes inserted."""
    out = bytearray()
    total = len(data)
    for position, value in enumerate(data):
        remaining_after = total - position - 1
        if (
            len(out) > 2
            and remaining_after >= 2
            and out[-2] == 0
            and out[-1] == 0
            and value <= 3
        ):
            out.append(3)
        out.append(value)
    return bytes(out)


def _build_crc_table() -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte << 24
        for _ in range(8):
            if crc & 0x80000000:
                crc = ((crc << 1) ^ _CRC32_MPEG2_POLY) & 0xFFFFFFFF
            else:
                crc = (crc << 1) & 0xFFFFFFFF
        table.append(crc)
    return tuple(table)


_CRC_TABLE = _build_crc_table()


def compute_crc32(data: bytes) -> int:
    """CRC-32/MPEG-2 checksum of the data."""
    crc = 0xFFFFFFFF
    for byte in data:
        crc = ((crc << 8) & 0xFFFFFFFF) ^ _CRC_TABLE[((crc >> 24) ^ byte) & 0xFF]
    return crc