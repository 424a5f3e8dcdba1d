import pytest

from dovirpu.bitstream import BitReader, BitWriter
from dovirpu.utils import DoviError
from dovirpu.vdr_dm_data import CmVersion, VdrDmData


def _encode(data: VdrDmData) -> bytes:
    writer = BitWriter()
    data.write(writer)
    return writer.as_bytes()


def _p81() -> VdrDmData:
    data = VdrDmData.default_pq()
    data.set_p81_coeffs()
    return data


def test_default_pq_values():
    data = VdrDmData.default_pq()
    assert data.signal_eotf == 65535
    assert data.signal_bit_depth == 12
    assert data.signal_full_range_flag == 1
    assert data.source_diagonal == 42
    assert data.compressed is False


def test_set_p81_coeffs_values():
    data = VdrDmData.default_pq()
    data.signal_color_space = 2
    data.set_p81_coeffs()
    assert data.ycc_to_rgb_coef4 == -1540
    assert data.ycc_to_rgb_coef5 == -5348
    assert data.ycc_to_rgb_offset0 == 16777216
    assert data.rgb_to_lms_coef8 == 15962
    assert data.signal_color_space == 0


def test_round_trip_with_negative_coefficients():
    original = _p81()
    original.affected_dm_metadata_id = 3
    original.current_dm_metadata_id = 5
    original.scene_refresh_flag = 1
    original.source_min_pq = 62
    original.source_max_pq = 3079
    parsed = VdrDmData.parse(BitReader(_encode(original)))
    assert parsed == original


def test_round_trip_default_pq():
    original = VdrDmData.default_pq()
    assert VdrDmData.parse(BitReader(_encode(original))) == original


def test_write_is_stable_after_round_trip():
    encoded = _encode(_p81())
    assert _encode(VdrDmData.parse(BitReader(encoded))) == encoded


def test_compressed_round_trip():
    original = VdrDmData(
        compressed=True,
        affected_dm_metadata_id=2,
        current_dm_metadata_id=4,
        scene_refresh_flag=1,
    )
    parsed = VdrDmData.parse_compressed(BitReader(_encode(original)))
    assert parsed == original


def test_compressed_write_omits_fixed_fields():
    full = _p81()
    compressed = _p81()
    compressed.compressed = True
    assert len(_encode(compressed)) < len(_encode(full))
    parsed = VdrDmData.parse_compressed(BitReader(_encode(compressed)))
    assert parsed.ycc_to_rgb_coef0 == 0
    assert parsed.scene_refresh_flag == compressed.scene_refresh_flag


def test_all_zero_ids_encode_as_single_bits():
    data = VdrDmData(compressed=True)
    # Three Exp-Golomb zeros are three '1' bits, padded to one byte.
    assert _encode(data) == bytes([0b11100000])


def test_parse_truncated_raises():
    encoded = _encode(_p81())
    with pytest.raises(DoviError):
        VdrDmData.parse(BitReader(encoded[:10]))


def test_set_scene_cut():
    data = VdrDmData.default_pq()
    data.set_scene_cut(True)
    assert data.scene_refresh_flag == 1
    data.set_scene_cut(False)
    assert data.scene_refresh_flag == 0


def test_validate_accepts_defaults():
    data = _p81()
    data.validate()
    assert data.signal_bit_depth == 12


def test_validate_rejects_large_affected_id():
    data = VdrDmData.default_pq()
    data.affected_dm_metadata_id = 16
    with pytest.raises(DoviError, match="affected_dm_metadata_id"):
        data.validate()


@pytest.mark.parametrize("depth", [7, 17])
def test_validate_rejects_bit_depth(depth):
    data = VdrDmData.default_pq()
    data.signal_bit_depth = depth
    with pytest.raises(DoviError, match="signal_bit_depth"):
        data.validate()


def test_validate_rejects_non_pq_eotf_without_params():
    data = VdrDmData.default_pq()
    data.signal_eotf = 39322
    with pytest.raises(DoviError, match="signal_eotf"):
        data.validate()


def test_validate_allows_other_eotf_with_params():
    data = VdrDmData.default_pq()
    data.signal_eotf = 39322
    data.signal_eotf_param0 = 15867
    data.signal_eotf_param1 = 228
    data.signal_eotf_param2 = 1383604
    data.validate()
    assert data.signal_eotf == 39322


def test_validate_compressed_skips_signal_checks():
    data = VdrDmData(compressed=True)
    data.validate()
    assert data.signal_bit_depth == 0
    data.affected_dm_metadata_id = 20
    with pytest.raises(DoviError):
        data.validate()


def test_cm_versions_are_distinct():
    assert CmVersion("V29") is CmVersion.V29
    assert CmVersion.V29 != CmVersion.V40


def test_field_names_start_with_flags():
    names = VdrDmData().field_names()
    assert names[:4] == (
        "compressed",
        "affected_dm_metadata_id",
        "current_dm_metadata_id",
        "scene_refresh_flag",
    )
    assert names[-1] == "source_diagonal"