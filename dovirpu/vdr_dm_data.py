"""VDR display management data: parsing, validation and writing."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from .bitstream import BitReader, BitWriter
from .utils import DoviError

_MAX_DM_METADATA_ID = 15
_EOTF_PQ = 65535


class CmVersion(Enum):
    """Content mapping version."""

    V29 = "V29"
    V40 = "V40"


def _to_i16(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


def _ensure(condition: bool, message: str) -> None:
    if not condition:
        raise DoviError(message)


# Fixed-width fields of the uncompressed payload, in bitstream order:
# (name, bit width, signed)
_FIXED_LAYOUT: tuple[tuple[str, int, bool], ...] = (
    *((f"ycc_to_rgb_coef{i}", 16, True) for i in range(9)),
    *((f"ycc_to_rgb_offset{i}", 32, False) for i in range(3)),
    *((f"rgb_to_lms_coef{i}", 16, True) for i in range(9)),
    ("signal_eotf", 16, False),
    ("signal_eotf_param0", 16, False),
    ("signal_eotf_param1", 16, False),
    ("signal_eotf_param2", 32, False),
    ("signal_bit_depth", 5, False),
    ("signal_color_space", 2, False),
    ("signal_chroma_format", 2, False),
    ("signal_full_range_flag", 2, False),
    ("source_min_pq", 12, False),
    ("source_max_pq", 12, False),
    ("source_diagonal", 10, False),
)


@dataclass
class VdrDmData:
    """Display management parameters of an RPU."""

    compressed: bool = False

    affected_dm_metadata_id: int = 0
    current_dm_metadata_id: int = 0
    scene_refresh_flag: int = 0

    ycc_to_rgb_coef0: int = 0
    ycc_to_rgb_coef1: int = 0
    ycc_to_rgb_coef2: int = 0
    ycc_to_rgb_coef3: int = 0
    ycc_to_rgb_coef4: int = 0
    ycc_to_rgb_coef5: int = 0
    ycc_to_rgb_coef6: int = 0
    ycc_to_rgb_coef7: int = 0
    ycc_to_rgb_coef8: int = 0
    ycc_to_rgb_offset0: int = 0
    ycc_to_rgb_offset1: int = 0
    ycc_to_rgb_offset2: int = 0
    rgb_to_lms_coef0: int = 0
    rgb_to_lms_coef1: int = 0
    rgb_to_lms_coef2: int = 0
    rgb_to_lms_coef3: int = 0
    rgb_to_lms_coef4: int = 0
    rgb_to_lms_coef5: int = 0
    rgb_to_lms_coef6: int = 0
    rgb_to_lms_coef7: int = 0
    rgb_to_lms_coef8: int = 0
    signal_eotf: int = 0
    signal_eotf_param0: int = 0
    signal_eotf_param1: int = 0
    signal_eotf_param2: int = 0
    signal_bit_depth: int = 0
    signal_color_space: int = 0
    signal_chroma_format: int = 0
    signal_full_range_flag: int = 0
    source_min_pq: int = 0
    source_max_pq: int = 0
    source_diagonal: int = 0

    @classmethod
    def parse(cls, reader: BitReader) -> "VdrDmData":
        """Read an uncompressed DM data payload."""
        values = {
            "affected_dm_metadata_id": reader.get_ue(),
            "current_dm_metadata_id": reader.get_ue(),
            "scene_refresh_flag": reader.get_ue(),
        }
        for name, width, signed in _FIXED_LAYOUT:
            raw = reader.get_n(width)
            values[name] = _to_i16(raw) if signed else raw
        return cls(**values)

    @classmethod
    def parse_compressed(cls, reader: BitReader) -> "VdrDmData":
        """Read a compressed DM data payload, which carries only the IDs."""
        return cls(
            compressed=True,
            affected_dm_metadata_id=reader.get_ue(),
            current_dm_metadata_id=reader.get_ue(),
            scene_refresh_flag=reader.get_ue(),
        )

    def validate(self) -> None:
        """Raise DoviError if the parameters are out of range."""
        _ensure(
            self.affected_dm_metadata_id <= _MAX_DM_METADATA_ID,
            "affected_dm_metadata_id should be <= 15",
        )

        # Compressed payloads do not carry the signal description.
        if self.compressed:
            return

        _ensure(
            8 <= self.signal_bit_depth <= 16,
            "signal_bit_depth should be between 8 and 16",
        )

        if (
            self.signal_eotf_param0 == 0
            and self.signal_eotf_param1 == 0
            and self.signal_eotf_param2 == 0
        ):
            _ensure(self.signal_eotf == _EOTF_PQ, "signal_eotf should be 65535")

    def write(self, writer: BitWriter) -> None:
        """Write the DM data payload."""
        writer.write_ue(self.affected_dm_metadata_id)
        writer.write_ue(self.current_dm_metadata_id)
        writer.write_ue(self.scene_refresh_flag)

        if self.compressed:
            return

        for name, width, _signed in _FIXED_LAYOUT:
            writer.write_n(getattr(self, name), width)

    def set_p81_coeffs(self) -> None:
        """Set the colour conversion coefficients used by profile 8.1."""
        self.ycc_to_rgb_coef0 = 9574
        self.ycc_to_rgb_coef1 = 0
        self.ycc_to_rgb_coef2 = 13802
        self.ycc_to_rgb_coef3 = 9574
        self.ycc_to_rgb_coef4 = -1540
        self.ycc_to_rgb_coef5 = -5348
        self.ycc_to_rgb_coef6 = 9574
        self.ycc_to_rgb_coef7 = 17610
        self.ycc_to_rgb_coef8 = 0
        self.ycc_to_rgb_offset0 = 16777216
        self.ycc_to_rgb_offset1 = 134217728
        self.ycc_to_rgb_offset2 = 134217728

        self.rgb_to_lms_coef0 = 7222
        self.rgb_to_lms_coef1 = 8771
        self.rgb_to_lms_coef2 = 390
        self.rgb_to_lms_coef3 = 2654
        self.rgb_to_lms_coef4 = 12430
        self.rgb_to_lms_coef5 = 1300
        self.rgb_to_lms_coef6 = 0
        self.rgb_to_lms_coef7 = 422
        self.rgb_to_lms_coef8 = 15962

        self.signal_color_space = 0

    def set_scene_cut(self, is_scene_cut: bool) -> None:
        """Mark or unmark this frame as the start of a scene."""
        self.scene_refresh_flag = int(bool(is_scene_cut))

    @classmethod
    def default_pq(cls) -> "VdrDmData":
        """DM data describing a 12-bit full range PQ signal."""
        return cls(
            signal_eotf=_EOTF_PQ,
            signal_bit_depth=12,
            signal_full_range_flag=1,
            source_diagonal=42,
        )

    def field_names(self) -> tuple[str, ...]:
        """Names of all parameters, in declaration order."""
        return tuple(f.name for f in fields(self))