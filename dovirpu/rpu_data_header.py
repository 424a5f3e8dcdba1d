"""RPU data header: parsing, validation and writing."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from .bitstream import BitReader, BitWriter
from .utils import NUM_COMPONENTS, DoviError

NLQ_NUM_PIVOTS = 2

_RPU_NAL_PREFIX = 25
_RPU_TYPE_DOVI = 2
_NO_SEQ_INFO_FORMAT_MASK = 0x700


def _component_ints() -> list[int]:
    return [0] * NUM_COMPONENTS


def _component_lists() -> list[list[int]]:
    return [[] for _ in range(NUM_COMPONENTS)]


def _ensure(condition: bool, message: str) -> None:
    if not condition:
        raise DoviError(message)


@dataclass
class RpuDataHeader:
    """Header of a Dolby Vision RPU."""

    rpu_nal_prefix: int = 0
    rpu_type: int = 0
    rpu_format: int = 0
    vdr_rpu_profile: int = 0
    vdr_rpu_level: int = 0
    vdr_seq_info_present_flag: bool = False
    chroma_resampling_explicit_filter_flag: bool = False
    coefficient_data_type: int = 0
    coefficient_log2_denom: int = 0
    vdr_rpu_normalized_idc: int = 0
    bl_video_full_range_flag: bool = False
    bl_bit_depth_minus8: int = 0
    el_bit_depth_minus8: int = 0
    vdr_bit_depth_minus_8: int = 0
    spatial_resampling_filter_flag: bool = False
    reserved_zero_3bits: int = 0
    el_spatial_resampling_filter_flag: bool = False
    disable_residual_flag: bool = False
    vdr_dm_metadata_present_flag: bool = False
    use_prev_vdr_rpu_flag: bool = False
    prev_vdr_rpu_id: int = 0
    vdr_rpu_id: int = 0
    mapping_color_space: int = 0
    mapping_chroma_format_idc: int = 0
    num_pivots_minus_2: list[int] = field(default_factory=_component_ints)
    pred_pivot_value: list[list[int]] = field(default_factory=_component_lists)
    nlq_method_idc: Optional[int] = None
    nlq_num_pivots_minus2: Optional[int] = None
    nlq_pred_pivot_value: Optional[tuple[int, int]] = None
    num_x_partitions_minus1: int = 0
    num_y_partitions_minus1: int = 0

    @property
    def _has_bit_depth_info(self) -> bool:
        return self.rpu_format & _NO_SEQ_INFO_FORMAT_MASK == 0

    @classmethod
    def parse(cls, reader: BitReader) -> "RpuDataHeader":
        """Read a header from the bit reader."""
        header = cls(rpu_nal_prefix=reader.get_n(8))

        if header.rpu_nal_prefix != _RPU_NAL_PREFIX:
            return header

        header.rpu_type = reader.get_n(6)
        header.rpu_format = reader.get_n(11)

        if header.rpu_type != _RPU_TYPE_DOVI:
            return header

        header.vdr_rpu_profile = reader.get_n(4)
        header.vdr_rpu_level = reader.get_n(4)
        header.vdr_seq_info_present_flag = reader.get()

        if header.vdr_seq_info_present_flag:
            header.chroma_resampling_explicit_filter_flag = reader.get()
            header.coefficient_data_type = reader.get_n(2)

            if header.coefficient_data_type == 0:
                header.coefficient_log2_denom = reader.get_ue()

            header.vdr_rpu_normalized_idc = reader.get_n(2)
            header.bl_video_full_range_flag = reader.get()

            if header._has_bit_depth_info:
                header.bl_bit_depth_minus8 = reader.get_ue()
                header.el_bit_depth_minus8 = reader.get_ue()
                header.vdr_bit_depth_minus_8 = reader.get_ue()
                header.spatial_resampling_filter_flag = reader.get()
                header.reserved_zero_3bits = reader.get_n(3)
                header.el_spatial_resampling_filter_flag = reader.get()
                header.disable_residual_flag = reader.get()

        header.vdr_dm_metadata_present_flag = reader.get()
        header.use_prev_vdr_rpu_flag = reader.get()

        if header.use_prev_vdr_rpu_flag:
            header.prev_vdr_rpu_id = reader.get_ue()
            return header

        header.vdr_rpu_id = reader.get_ue()
        header.mapping_color_space = reader.get_ue()
        header.mapping_chroma_format_idc = reader.get_ue()

        bl_bit_depth = header.bl_bit_depth_minus8 + 8

        num_pivots = []
        pivot_values = []
        for _ in range(NUM_COMPONENTS):
            pivots_minus_2 = reader.get_ue()
            num_pivots.append(pivots_minus_2)
            pivot_values.append(
                [reader.get_n(bl_bit_depth) for _ in range(pivots_minus_2 + 2)]
            )
        header.num_pivots_minus_2 = num_pivots
        header.pred_pivot_value = pivot_values

        # Profile 7 only
        if header._has_bit_depth_info and not header.disable_residual_flag:
            header.nlq_method_idc = reader.get_n(3)
            header.nlq_num_pivots_minus2 = 0
            first = reader.get_n(bl_bit_depth)
            second = reader.get_n(bl_bit_depth)
            header.nlq_pred_pivot_value = (first, second)

        header.num_x_partitions_minus1 = reader.get_ue()
        header.num_y_partitions_minus1 = reader.get_ue()

        return header

    def validate(self, profile: int) -> None:
        """Raise DoviError if the header is not valid for the given profile."""
        _ensure(self.rpu_nal_prefix == _RPU_NAL_PREFIX, "rpu_nal_prefix should be 25")

        if profile == 5:
            _ensure(self.vdr_rpu_profile == 0, "profile 5: vdr_rpu_profile should be 0")
            _ensure(
                self.bl_video_full_range_flag,
                "profile 5: bl_video_full_range_flag should be true",
            )
            _ensure(
                self.nlq_method_idc is None,
                "profile 5: nlq_method_idc should be undefined",
            )
            _ensure(
                self.nlq_num_pivots_minus2 is None,
                "profile 5: nlq_num_pivots_minus2 should be undefined",
            )
            _ensure(
                self.nlq_pred_pivot_value is None,
                "profile 5: nlq_pred_pivot_value should be undefined",
            )
        elif profile == 7:
            _ensure(self.vdr_rpu_profile == 1, "profile 7: vdr_rpu_profile should be 1")
            _ensure(
                self.nlq_pred_pivot_value is not None,
                "profile 7: nlq_pred_pivot_value should be defined",
            )
            _ensure(
                sum(self.nlq_pred_pivot_value) == 1023,
                "profile 7: nlq_pred_pivot_value elements should add up to the BL bit depth",
            )
        elif profile == 8:
            _ensure(self.vdr_rpu_profile == 1, "profile 8: vdr_rpu_profile should be 1")
            _ensure(
                self.nlq_method_idc is None,
                "profile 8: nlq_method_idc should be undefined",
            )
            _ensure(
                self.nlq_num_pivots_minus2 is None,
                "profile 8: nlq_num_pivots_minus2 should be undefined",
            )
            _ensure(
                self.nlq_pred_pivot_value is None,
                "profile 8: nlq_pred_pivot_value should be undefined",
            )

        _ensure(self.vdr_rpu_level == 0, "vdr_rpu_level should be 0")
        _ensure(self.bl_bit_depth_minus8 == 2, "bl_bit_depth_minus8 should be 2")
        _ensure(self.el_bit_depth_minus8 == 2, "el_bit_depth_minus8 should be 2")
        _ensure(self.vdr_bit_depth_minus_8 <= 6, "vdr_bit_depth_minus_8 should be <= 6")
        _ensure(self.mapping_color_space == 0, "mapping_color_space should be 0")
        _ensure(
            self.mapping_chroma_format_idc == 0,
            "mapping_chroma_format_idc should be 0",
        )
        _ensure(
            self.coefficient_log2_denom <= 23,
            "coefficient_log2_denom should be <= 23",
        )

    def get_dovi_profile(self) -> int:
        """Deduce the Dolby Vision profile, or 0 when unknown."""
        if self.vdr_rpu_profile == 0:
            # Profile 5 is full range
            return 5 if self.bl_video_full_range_flag else 0
        if self.vdr_rpu_profile == 1:
            if self.el_spatial_resampling_filter_flag and not self.disable_residual_flag:
                return 7 if self.vdr_bit_depth_minus_8 == 4 else 4
            return 8
        return 0

    def write_header(self, writer: BitWriter) -> None:
        """Write the header to the bit writer."""
        writer.write_n(self.rpu_nal_prefix, 8)

        if self.rpu_nal_prefix != _RPU_NAL_PREFIX:
            return

        writer.write_n(self.rpu_type, 6)
        writer.write_n(self.rpu_format, 11)

        if self.rpu_type != _RPU_TYPE_DOVI:
            return

        writer.write_n(self.vdr_rpu_profile, 4)
        writer.write_n(self.vdr_rpu_level, 4)
        writer.write(self.vdr_seq_info_present_flag)

        if self.vdr_seq_info_present_flag:
            writer.write(self.chroma_resampling_explicit_filter_flag)
            writer.write_n(self.coefficient_data_type, 2)

            if self.coefficient_data_type == 0:
                writer.write_ue(self.coefficient_log2_denom)

            writer.write_n(self.vdr_rpu_normalized_idc, 2)
            writer.write(self.bl_video_full_range_flag)

            if self._has_bit_depth_info:
                writer.write_ue(self.bl_bit_depth_minus8)
                writer.write_ue(self.el_bit_depth_minus8)
                writer.write_ue(self.vdr_bit_depth_minus_8)
                writer.write(self.spatial_resampling_filter_flag)
                writer.write_n(self.reserved_zero_3bits, 3)
                writer.write(self.el_spatial_resampling_filter_flag)
                writer.write(self.disable_residual_flag)

        writer.write(self.vdr_dm_metadata_present_flag)
        writer.write(self.use_prev_vdr_rpu_flag)

        if self.use_prev_vdr_rpu_flag:
            writer.write_ue(self.prev_vdr_rpu_id)
            return

        writer.write_ue(self.vdr_rpu_id)
        writer.write_ue(self.mapping_color_space)
        writer.write_ue(self.mapping_chroma_format_idc)

        bl_bit_depth = self.bl_bit_depth_minus8 + 8

        for pivots_minus_2, values in zip(self.num_pivots_minus_2, self.pred_pivot_value):
            writer.write_ue(pivots_minus_2)
            count = pivots_minus_2 + 2
            if len(values) < count:
                raise DoviError(
                    f"expected {count} pivot values, got {len(values)}"
                )
            for value in values[:count]:
                writer.write_n(value, bl_bit_depth)

        if self._has_bit_depth_info and not self.disable_residual_flag:
            if self.nlq_method_idc is not None:
                writer.write_n(self.nlq_method_idc, 3)

            if self.nlq_pred_pivot_value is not None:
                for value in self.nlq_pred_pivot_value:
                    writer.write_n(value, bl_bit_depth)

        writer.write_ue(self.num_x_partitions_minus1)
        writer.write_ue(self.num_y_partitions_minus1)

    @classmethod
    def p5_default(cls) -> "RpuDataHeader":
        """Default header for profile 5."""
        return replace(cls.p8_default(), vdr_rpu_profile=0, bl_video_full_range_flag=True)

    @classmethod
    def p8_default(cls) -> "RpuDataHeader":
        """Default header for profile 8."""
        return cls(
            rpu_nal_prefix=25,
            rpu_type=2,
            rpu_format=18,
            vdr_rpu_profile=1,
            vdr_rpu_level=0,
            vdr_seq_info_present_flag=True,
            chroma_resampling_explicit_filter_flag=False,
            coefficient_data_type=0,
            coefficient_log2_denom=23,
            vdr_rpu_normalized_idc=1,
            bl_video_full_range_flag=False,
            bl_bit_depth_minus8=2,
            el_bit_depth_minus8=2,
            vdr_bit_depth_minus_8=4,
            spatial_resampling_filter_flag=False,
            reserved_zero_3bits=0,
            el_spatial_resampling_filter_flag=False,
            disable_residual_flag=True,
            vdr_dm_metadata_present_flag=True,
            use_prev_vdr_rpu_flag=False,
            prev_vdr_rpu_id=0,
            vdr_rpu_id=0,
            mapping_color_space=0,
            mapping_chroma_format_idc=0,
            num_pivots_minus_2=[0, 0, 0],
            pred_pivot_value=[[0, 1023], [0, 1023], [0, 1023]],
            nlq_method_idc=None,
            nlq_num_pivots_minus2=None,
            nlq_pred_pivot_value=None,
            num_x_partitions_minus1=0,
            num_y_partitions_minus1=0,
        )