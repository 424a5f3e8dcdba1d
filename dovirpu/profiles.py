"""Per-profile default RPU parameters."""

from __future__ import annotations

from dataclasses import replace

from .rpu_data_header import RpuDataHeader
from .rpu_data_mapping import RpuDataMapping
from .vdr_dm_data import VdrDmData


class DoviProfile:
    """Defaults shared by Dolby Vision profiles."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        """Default DM data for the profile."""
        return VdrDmData.default_pq()

    @classmethod
    def backwards_compatible(cls) -> bool:
        """Whether the base layer is viewable without Dolby Vision."""
        return True


class Profile4(DoviProfile):
    """Profile 4: SDR base layer with enhancement layer."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        return VdrDmData(
            ycc_to_rgb_coef0=9575,
            ycc_to_rgb_coef1=0,
            ycc_to_rgb_coef2=14742,
            ycc_to_rgb_coef3=9575,
            ycc_to_rgb_coef4=-1754,
            ycc_to_rgb_coef5=-4383,
            ycc_to_rgb_coef6=9575,
            ycc_to_rgb_coef7=17372,
            ycc_to_rgb_coef8=0,
            ycc_to_rgb_offset0=67108864,
            ycc_to_rgb_offset1=536870912,
            ycc_to_rgb_offset2=536870912,
            rgb_to_lms_coef0=5845,
            rgb_to_lms_coef1=9702,
            rgb_to_lms_coef2=837,
            rgb_to_lms_coef3=2568,
            rgb_to_lms_coef4=12256,
            rgb_to_lms_coef5=1561,
            rgb_to_lms_coef6=0,
            rgb_to_lms_coef7=679,
            rgb_to_lms_coef8=15705,
            signal_eotf=39322,
            signal_eotf_param0=15867,
            signal_eotf_param1=228,
            signal_eotf_param2=1383604,
            signal_bit_depth=14,
            signal_full_range_flag=1,
            source_diagonal=42,
        )


class Profile5(DoviProfile):
    """Profile 5: IPT base layer, not backwards compatible."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        return replace(
            VdrDmData.default_pq(),
            ycc_to_rgb_coef0=8192,
            ycc_to_rgb_coef1=799,
            ycc_to_rgb_coef2=1681,
            ycc_to_rgb_coef3=8192,
            ycc_to_rgb_coef4=-933,
            ycc_to_rgb_coef5=1091,
            ycc_to_rgb_coef6=8192,
            ycc_to_rgb_coef7=267,
            ycc_to_rgb_coef8=-5545,
            ycc_to_rgb_offset0=0,
            ycc_to_rgb_offset1=134217728,
            ycc_to_rgb_offset2=134217728,
            rgb_to_lms_coef0=17081,
            rgb_to_lms_coef1=-349,
            rgb_to_lms_coef2=-349,
            rgb_to_lms_coef3=-349,
            rgb_to_lms_coef4=17081,
            rgb_to_lms_coef5=-349,
            rgb_to_lms_coef6=-349,
            rgb_to_lms_coef7=-349,
            rgb_to_lms_coef8=17081,
            signal_color_space=2,
        )

    @classmethod
    def backwards_compatible(cls) -> bool:
        return False


class Profile81(DoviProfile):
    """Profile 8.1: HDR10 base layer."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        return replace(
            VdrDmData.default_pq(),
            ycc_to_rgb_coef0=9574,
            ycc_to_rgb_coef1=0,
            ycc_to_rgb_coef2=13802,
            ycc_to_rgb_coef3=9574,
            ycc_to_rgb_coef4=-1540,
            ycc_to_rgb_coef5=-5348,
            ycc_to_rgb_coef6=9574,
            ycc_to_rgb_coef7=17610,
            ycc_to_rgb_coef8=0,
            ycc_to_rgb_offset0=16777216,
            ycc_to_rgb_offset1=134217728,
            ycc_to_rgb_offset2=134217728,
            rgb_to_lms_coef0=7222,
            rgb_to_lms_coef1=8771,
            rgb_to_lms_coef2=390,
            rgb_to_lms_coef3=2654,
            rgb_to_lms_coef4=12430,
            rgb_to_lms_coef5=1300,
            rgb_to_lms_coef6=0,
            rgb_to_lms_coef7=422,
            rgb_to_lms_coef8=15962,
        )

    @classmethod
    def rpu_data_mapping(cls) -> RpuDataMapping:
        """Identity polynomial mapping for every component."""
        return RpuDataMapping(
            mapping_idc=[[0], [0], [0]],
            mapping_param_pred_flag=[[False], [False], [False]],
            num_mapping_param_predictors=[[0], [0], [0]],
            diff_pred_part_idx_mapping_minus1=[[], [], []],
            poly_order_minus1=[[0], [0], [0]],
            linear_interp_flag=[[False], [False], [False]],
            pred_linear_interp_value_int=[[], [], []],
            pred_linear_interp_value=[[], [], []],
            poly_coef_int=[[[0, 1]], [[0, 1]], [[0, 1]]],
            poly_coef=[[[0, 0]], [[0, 0]], [[0, 0]]],
            mmr_order_minus1=[[], [], []],
            mmr_constant_int=[[], [], []],
            mmr_constant=[[], [], []],
            mmr_coef_int=[[[]], [[]], [[]]],
            mmr_coef=[[[]], [[]], [[]]],
        )


class Profile7(DoviProfile):
    """Profile 7: dual layer, shares profile 8.1 DM data."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        return Profile81.dm_data()


class Profile84(DoviProfile):
    """Profile 8.4: HLG base layer with static reshaping."""

    @classmethod
    def dm_data(cls) -> VdrDmData:
        return replace(Profile81.dm_data(), source_min_pq=62, source_max_pq=3079)

    @classmethod
    def rpu_data_header(cls) -> RpuDataHeader:
        """Header with the pivots of the static reshaping."""
        return replace(
            RpuDataHeader.p8_default(),
            num_pivots_minus_2=[7, 0, 0],
            pred_pivot_value=[
                [63, 69, 230, 256, 256, 37, 16, 8, 7],
                [0, 1023],
                [0, 1023],
            ],
        )

    @classmethod
    def rpu_data_mapping(cls) -> RpuDataMapping:
        """Polynomial luma and MMR chroma reshaping."""
        poly_coef_int_cmp0 = [
            [-1, 1, -3],
            [-1, 1, -2],
            [0, 0, -1],
            [0, 0, 0],
            [0, -2, 1],
            [6, -14, 8],
            [13, -30, 16],
            [28, -62, 34],
        ]
        poly_coef_cmp0 = [
            [7978928, 8332855, 4889184],
            [8269552, 5186604, 3909327],
            [1317527, 5338528, 7440486],
            [2119979, 2065496, 2288524],
            [7982780, 5409990, 1585336],
            [3460436, 3197328, 615464],
            [3921968, 6820672, 5546752],
            [1947392, 1244640, 6094272],
        ]
        mmr_coef_int_cmp1 = [[
            [0] * 7,
            [-1, -2, -5, 2, 5, 9, -12],
            [-1, -1, 3, -1, -5, -12, 18],
            [-1, 0, -2, 0, 2, 7, -19],
        ]]
        mmr_coef_int_cmp2 = [[
            [0] * 7,
            [4, 0, 5, -2, -8, -1, 1],
            [-4, -1, -6, 1, 12, 0, -4],
            [1, 0, 2, -1, -8, -1, 4],
        ]]
        mmr_coef_cmp1 = [[
            [0] * 7,
            [87355, 6228986, 642500, 1023296, 6569512, 5128216, 4317296],
            [8299905, 5819931, 2324124, 7273546, 1562484, 3679480, 6357360],
            [8172981, 3261951, 5970055, 927142, 3525840, 5110348, 6236848],
        ]]
        mmr_coef_cmp2 = [[
            [0] * 7,
            [193104, 5369128, 2553116, 8009648, 2772020, 3122453, 2961581],
            [6769788, 2565605, 7864496, 4777288, 649616, 7036536, 1666406],
            [406265, 2901521, 2680224, 146340, 1008052, 4366810, 5080852],
        ]]

        return RpuDataMapping(
            mapping_idc=[[0] * 8, [1], [1]],
            mapping_param_pred_flag=[[False] * 8, [False], [False]],
            num_mapping_param_predictors=[[0] * 8, [0], [0]],
            diff_pred_part_idx_mapping_minus1=[[], [], []],
            poly_order_minus1=[[1] * 8, [], []],
            linear_interp_flag=[[], [], []],
            pred_linear_interp_value_int=[[], [], []],
            pred_linear_interp_value=[[], [], []],
            poly_coef_int=[poly_coef_int_cmp0, [], []],
            poly_coef=[poly_coef_cmp0, [], []],
            mmr_order_minus1=[[0], [2], [2]],
            mmr_constant_int=[[0], [1], [-2]],
            mmr_constant=[[0], [1150183], [6266112]],
            mmr_coef_int=[[[]], mmr_coef_int_cmp1, mmr_coef_int_cmp2],
            mmr_coef=[[[]], mmr_coef_cmp1, mmr_coef_cmp2],
        )