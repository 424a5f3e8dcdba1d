"""ST 2094-10 metadata carried in ITU-T T.35 SEI messages."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bitstream import BitReader
from .utils import (
    NUM_COMPONENTS,
    DoviError,
    clear_start_code_emulation_prevention_3_byte,
)

_COUNTRY_CODE = 0xB5
_PROVIDER_CODE = 0x31
_USER_IDENTIFIER = 0x47413934
_CM_DATA_TYPE = 0x08
_DM_DATA_TYPE = 0x09

_MAPPING_POLYNOMIAL = 0
_MAPPING_MMR = 1
_MMR_COEF_COUNT = 7
_MMR_ROW_SIZE = 8

_SEI_PREFIX = (0x4E, 0x01, 0x04)
_T35_PREFIX = (0xB5, 0x00, 0x31)
_T35_START = (0xB5, 0x00, 0x31, 0x47, 0x41, 0x39, 0x34)


def _per_component() -> list:
    return [[] for _ in range(NUM_COMPONENTS)]


def _zeros() -> list[int]:
    return [0] * NUM_COMPONENTS


@dataclass
class ST2094_10CmData:
    """Content mapping data of ST 2094-10."""

    ccm_profile: int = 0
    ccm_level: int = 0
    coefficient_log2_denom: int = 0
    bl_bit_depth_minus8: int = 0
    el_bit_depth_minus8: int = 0
    hdr_bit_depth_minus8: int = 0
    disable_residual_flag: bool = False

    num_pivots_minus2: list[int] = field(default_factory=_zeros)
    pred_pivot_value: list[list[int]] = field(default_factory=_per_component)

    mapping_idc: list[list[int]] = field(default_factory=_per_component)
    poly_order_minus1: list[list[int]] = field(default_factory=_per_component)
    poly_coef_int: list[list[list[int]]] = field(default_factory=_per_component)
    poly_coef: list[list[list[int]]] = field(default_factory=_per_component)
    mmr_order_minus1: list[list[int]] = field(default_factory=_per_component)
    mmr_constant_int: list[list[int]] = field(default_factory=_per_component)
    mmr_constant: list[list[int]] = field(default_factory=_per_component)
    mmr_coef_int: list[list[list[list[int]]]] = field(default_factory=_per_component)
    mmr_coef: list[list[list[list[int]]]] = field(default_factory=_per_component)

    nlq_offset: list[int] = field(default_factory=_zeros)
    hdr_in_max_int: list[int] = field(default_factory=_zeros)
    hdr_in_max: list[int] = field(default_factory=_zeros)
    linear_deadzone_slope_int: list[int] = field(default_factory=_zeros)
    linear_deadzone_slope: list[int] = field(default_factory=_zeros)
    linear_deadzone_threshold_int: list[int] = field(default_factory=_zeros)
    linear_deadzone_threshold: list[int] = field(default_factory=_zeros)

    @classmethod
    def parse(cls, reader: BitReader) -> "ST2094_10CmData":
        """Read content mapping data from the bit reader."""
        meta = cls(
            ccm_profile=reader.get_n(4),
            ccm_level=reader.get_n(4),
            coefficient_log2_denom=reader.get_ue(),
            bl_bit_depth_minus8=reader.get_ue(),
            el_bit_depth_minus8=reader.get_ue(),
            hdr_bit_depth_minus8=reader.get_ue(),
            disable_residual_flag=reader.get(),
        )

        denom_length = meta.coefficient_log2_denom
        el_bit_depth = meta.el_bit_depth_minus8 + 8

        for cmp in range(NUM_COMPONENTS):
            pivots = meta.num_pivots_minus2[cmp] = reader.get_ue()
            meta.pred_pivot_value[cmp] = [
                reader.get_n(el_bit_depth) for _ in range(pivots + 2)
            ]

        for cmp in range(NUM_COMPONENTS):
            meta._parse_mapping(reader, cmp, denom_length)

        if not meta.disable_residual_flag:
            for cmp in range(NUM_COMPONENTS):
                meta.nlq_offset[cmp] = reader.get_n(el_bit_depth)
                meta.hdr_in_max_int[cmp] = reader.get_ue()
                meta.hdr_in_max[cmp] = reader.get_n(denom_length)
                meta.linear_deadzone_slope_int[cmp] = reader.get_ue()
                meta.linear_deadzone_slope[cmp] = reader.get_n(denom_length)
                meta.linear_deadzone_threshold_int[cmp] = reader.get_ue()
                meta.linear_deadzone_threshold[cmp] = reader.get_n(denom_length)

        return meta

    def _parse_mapping(self, reader: BitReader, cmp: int, denom_length: int) -> None:
        count = self.num_pivots_minus2[cmp] + 1

        mapping_idc = self.mapping_idc[cmp] = [0] * count
        poly_orders = self.poly_order_minus1[cmp] = [0] * count
        poly_ints = self.poly_coef_int[cmp] = [[] for _ in range(count)]
        poly_coefs = self.poly_coef[cmp] = [[] for _ in range(count)]
        mmr_orders = self.mmr_order_minus1[cmp] = [0] * count
        mmr_const_ints = self.mmr_constant_int[cmp] = [0] * count
        mmr_consts = self.mmr_constant[cmp] = [0] * count
        mmr_ints = self.mmr_coef_int[cmp] = [[] for _ in range(count)]
        mmr_coefs = self.mmr_coef[cmp] = [[] for _ in range(count)]

        for pivot_idx in range(count):
            mapping_idc[pivot_idx] = reader.get_ue()

            if mapping_idc[pivot_idx] == _MAPPING_POLYNOMIAL:
                order = poly_orders[pivot_idx] = reader.get_ue()
                ints = poly_ints[pivot_idx] = [0] * (order + 2)
                coefs = poly_coefs[pivot_idx] = [0] * (order + 2)
                for i in range(order + 2):
                    ints[i] = reader.get_se()
                    coefs[i] = reader.get_n(denom_length)
            elif mapping_idc[pivot_idx] == _MAPPING_MMR:
                order = mmr_orders[pivot_idx] = reader.get_n(2)
                mmr_const_ints[pivot_idx] = reader.get_se()
                mmr_consts[pivot_idx] = reader.get_n(denom_length)

                ints = mmr_ints[pivot_idx] = [[] for _ in range(order + 2)]
                coefs = mmr_coefs[pivot_idx] = [[] for _ in range(order + 2)]
                for i in range(1, order + 2):
                    row_ints = ints[i] = [0] * _MMR_ROW_SIZE
                    row = coefs[i] = [0] * _MMR_ROW_SIZE
                    for j in range(_MMR_COEF_COUNT):
                        row_ints[j] = reader.get_se()
                        row[j] = reader.get_n(denom_length)


@dataclass
class ST2094_10ItuT35:
    """ITU-T T.35 SEI payload holding ST 2094-10 metadata."""

    user_data_type_struct: ST2094_10CmData

    @classmethod
    def parse_itu_t35_dashif(cls, data: bytes) -> "ST2094_10ItuT35":
        """Parse a DASH-IF style T.35 payload."""
        trimmed = cls.validated_trimmed_data(data)
        reader = BitReader(clear_start_code_emulation_prevention_3_byte(trimmed))

        country_code = reader.get_n(8)
        provider_code = reader.get_n(16)
        if country_code != _COUNTRY_CODE:
            raise DoviError(f"invalid itu_t_t35_country_code: {country_code}")
        if provider_code != _PROVIDER_CODE:
            raise DoviError(f"invalid itu_t_t35_provider_code: {provider_code}")

        user_identifier = reader.get_n(32)
        if user_identifier != _USER_IDENTIFIER:
            raise DoviError(f"invalid user_identifier: {user_identifier}")

        user_data_type_code = reader.get_n(8)
        if user_data_type_code == _CM_DATA_TYPE:
            return cls(user_data_type_struct=ST2094_10CmData.parse(reader))
        if user_data_type_code == _DM_DATA_TYPE:
            raise DoviError("DM data user_data_type_code 9 is not supported")
        raise DoviError(f"Invalid user_data_type_code: {user_data_type_code}")

    @staticmethod
    def validated_trimmed_data(data: bytes) -> bytes:
        """Check the start bytes and drop an SEI header if present."""
        data = bytes(data)
        start = tuple(data[:7])
        if len(start) == 7:
            if start[:3] == _SEI_PREFIX and start[4:] == _T35_PREFIX:
                return data[4:]
            if start == _T35_START:
                return data
        raise DoviError(f"Invalid St2094-10 T-T35 SEI start bytes\n{list(start)}")