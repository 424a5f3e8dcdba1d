from dataclasses import replace

import pytest

from dovirpu.bitstream import BitReader, BitWriter
from dovirpu.rpu_data_header import RpuDataHeader
from dovirpu.rpu_data_mapping import RpuDataMapping
from dovirpu.utils import DoviError


def _round_trip(mapping, header):
    writer = BitWriter()
    mapping.write(writer, header)
    return RpuDataMapping.parse(BitReader(writer.as_bytes()), header)


def _p84_header():
    return replace(
        RpuDataHeader.p8_default(),
        num_pivots_minus_2=[7, 0, 0],
        pred_pivot_value=[
            [63, 69, 230, 256, 256, 37, 16, 8, 7],
            [0, 1023],
            [0, 1023],
        ],
    )


def _p84_mapping():
    return RpuDataMapping(
        mapping_idc=[[0] * 8, [1], [1]],
        mapping_param_pred_flag=[[False] * 8, [False], [False]],
        num_mapping_param_predictors=[[0] * 8, [0], [0]],
        poly_order_minus1=[[1] * 8, [], []],
        poly_coef_int=[
            [
                [-1, 1, -3],
                [-1, 1, -2],
                [0, 0, -1],
                [0, 0, 0],
                [0, -2, 1],
                [6, -14, 8],
                [13, -30, 16],
                [28, -62, 34],
            ],
            [],
            [],
        ],
        poly_coef=[
            [
                [7978928, 8332855, 4889184],
                [8269552, 5186604, 3909327],
                [1317527, 5338528, 7440486],
                [2119979, 2065496, 2288524],
                [7982780, 5409990, 1585336],
                [3460436, 3197328, 615464],
                [3921968, 6820672, 5546752],
                [1947392, 1244640, 6094272],
            ],
            [],
            [],
        ],
        mmr_order_minus1=[[0], [2], [2]],
        mmr_constant_int=[[0], [1], [-2]],
        mmr_constant=[[0], [1150183], [6266112]],
        mmr_coef_int=[
            [[]],
            [
                [
                    [0] * 7,
                    [-1, -2, -5, 2, 5, 9, -12],
                    [-1, -1, 3, -1, -5, -12, 18],
                    [-1, 0, -2, 0, 2, 7, -19],
                ]
            ],
            [
                [
                    [0] * 7,
                    [4, 0, 5, -2, -8, -1, 1],
                    [-4, -1, -6, 1, 12, 0, -4],
                    [1, 0, 2, -1, -8, -1, 4],
                ]
            ],
        ],
        mmr_coef=[
            [[]],
            [
                [
                    [0] * 7,
                    [87355, 6228986, 642500, 1023296, 6569512, 5128216, 4317296],
                    [8299905, 5819931, 2324124, 7273546, 1562484, 3679480, 6357360],
                    [8172981, 3261951, 5970055, 927142, 3525840, 5110348, 6236848],
                ]
            ],
            [
                [
                    [0] * 7,
                    [193104, 5369128, 2553116, 8009648, 2772020, 3122453, 2961581],
                    [6769788, 2565605, 7864496, 4777288, 649616, 7036536, 1666406],
                    [406265, 2901521, 2680224, 146340, 1008052, 4366810, 5080852],
                ]
            ],
        ],
    )


def test_set_empty_p81_mapping_fields():
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    assert mapping.mapping_idc == [[0], [0], [0]]
    assert mapping.poly_coef_int == [[[0, 1]], [[0, 1]], [[0, 1]]]
    assert mapping.poly_coef == [[[0, 0]], [[0, 0]], [[0, 0]]]
    assert mapping.mmr_coef == [[], [], []]


def test_empty_p81_mapping_round_trip():
    header = RpuDataHeader.p8_default()
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    parsed = _round_trip(mapping, header)
    assert parsed.mapping_idc == mapping.mapping_idc
    assert parsed.mapping_param_pred_flag == mapping.mapping_param_pred_flag
    assert parsed.poly_order_minus1 == mapping.poly_order_minus1
    assert parsed.linear_interp_flag == mapping.linear_interp_flag
    assert parsed.poly_coef_int == mapping.poly_coef_int
    assert parsed.poly_coef == mapping.poly_coef
    assert parsed.mmr_order_minus1 == [[], [], []]


def test_empty_p81_mapping_first_byte():
    # ue(0) mapping_idc, ue(0) order, flag 0, se(0), then zero coefficient bits
    header = RpuDataHeader.p8_default()
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    writer = BitWriter()
    mapping.write(writer, header)
    assert writer.as_bytes()[0] == 0xD0


def test_p84_mapping_round_trip():
    header = _p84_header()
    mapping = _p84_mapping()
    parsed = _round_trip(mapping, header)

    assert parsed.mapping_idc == mapping.mapping_idc
    assert parsed.poly_order_minus1[0] == mapping.poly_order_minus1[0]
    assert parsed.poly_coef_int[0] == mapping.poly_coef_int[0]
    assert parsed.poly_coef[0] == mapping.poly_coef[0]
    for cmp in (1, 2):
        assert parsed.mmr_order_minus1[cmp] == mapping.mmr_order_minus1[cmp]
        assert parsed.mmr_constant_int[cmp] == mapping.mmr_constant_int[cmp]
        assert parsed.mmr_constant[cmp] == mapping.mmr_constant[cmp]
        assert parsed.mmr_coef_int[cmp] == mapping.mmr_coef_int[cmp]
        assert parsed.mmr_coef[cmp] == mapping.mmr_coef[cmp]


def test_p84_rewrite_is_stable():
    header = _p84_header()
    first = BitWriter()
    _p84_mapping().write(first, header)
    second = BitWriter()
    RpuDataMapping.parse(BitReader(first.as_bytes()), header).write(second, header)
    assert second.as_bytes() == first.as_bytes()
    assert len(second) == len(first)


def test_linear_interpolation_round_trip():
    header = RpuDataHeader.p8_default()
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    mapping.linear_interp_flag = [[True], [False], [False]]
    mapping.pred_linear_interp_value_int = [[1, 2], [], []]
    mapping.pred_linear_interp_value = [[100, 4000], [], []]

    parsed = _round_trip(mapping, header)
    assert parsed.linear_interp_flag == [[True], [False], [False]]
    assert parsed.pred_linear_interp_value_int[0] == [1, 2]
    assert parsed.pred_linear_interp_value[0] == [100, 4000]
    assert parsed.poly_coef_int[0] == []


def test_float_coefficients_round_trip():
    header = replace(RpuDataHeader.p8_default(), coefficient_data_type=1)
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    mapping.poly_coef = [[[0x3F800000, 0]], [[0, 0]], [[0, 0x7FFFFFFF]]]

    parsed = _round_trip(mapping, header)
    assert parsed.poly_coef == mapping.poly_coef
    # Integer parts are not coded with float coefficients
    assert parsed.poly_coef_int == [[[0, 0]], [[0, 0]], [[0, 0]]]


@pytest.mark.parametrize("operation", ["parse", "write"])
def test_invalid_coefficient_data_type(operation):
    header = replace(RpuDataHeader.p8_default(), coefficient_data_type=2)
    mapping = RpuDataMapping()
    mapping.set_empty_p81_mapping()
    with pytest.raises(DoviError):
        if operation == "parse":
            RpuDataMapping.parse(BitReader(bytes(32)), header)
        else:
            mapping.write(BitWriter(), header)


def test_mmr_order_above_two_is_rejected():
    header = RpuDataHeader.p8_default()
    writer = BitWriter()
    writer.write_ue(1)
    writer.write_n(3, 2)
    writer.write_n(0, 64)
    with pytest.raises(DoviError):
        RpuDataMapping.parse(BitReader(writer.as_bytes()), header)


def test_truncated_data_raises():
    header = _p84_header()
    writer = BitWriter()
    _p84_mapping().write(writer, header)
    data = writer.as_bytes()
    with pytest.raises(DoviError):
        RpuDataMapping.parse(BitReader(data[: len(data) // 2]), header)