"""RPU NLQ data: non-linear quantisation parameters of the enhancement layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bitstream import BitReader, BitWriter
from .rpu_data_header import RpuDataHeader
from .utils import NUM_COMPONENTS, DoviError

_NLQ_LINEAR_DZ = 0


def _zeros() -> list[int]:
    return [0] * NUM_COMPONENTS


def _ones() -> list[int]:
    return [1] * NUM_COMPONENTS


def _pivot_count(header: RpuDataHeader) -> int:
    if header.nlq_num_pivots_minus2 is None:
        raise DoviError("Shouldn't be in NLQ if not profile 7!")
    return header.nlq_num_pivots_minus2 + 1


def _coefficient_length(header: RpuDataHeader) -> int:
    if header.coefficient_data_type == 0:
        return header.coefficient_log2_denom
    if header.coefficient_data_type == 1:
        return 32
    raise DoviError(
        f"Invalid coefficient_data_type value: {header.coefficient_data_type}"
    )


def _allocate(values: list[list[int]], count: int) -> None:
    if not values:
        values.extend(_zeros() for _ in range(count))


def _all_equal(values: list[list[int]], expected: int) -> bool:
    return all(item == expected for row in values for item in row)


@dataclass
class RpuDataNlq:
    """NLQ parameters, one row of per-component values for each pivot."""

    num_nlq_param_predictors: list[list[int]] = field(default_factory=list)
    nlq_param_pred_flag: list[list[bool]] = field(default_factory=list)
    diff_pred_part_idx_nlq_minus1: list[list[int]] = field(default_factory=list)
    nlq_offset: list[list[int]] = field(default_factory=list)
    vdr_in_max_int: list[list[int]] = field(default_factory=list)
    vdr_in_max: list[list[int]] = field(default_factory=list)
    linear_deadzone_slope_int: list[list[int]] = field(default_factory=list)
    linear_deadzone_slope: list[list[int]] = field(default_factory=list)
    linear_deadzone_threshold_int: list[list[int]] = field(default_factory=list)
    linear_deadzone_threshold: list[list[int]] = field(default_factory=list)

    @classmethod
    def parse(cls, reader: BitReader, header: RpuDataHeader) -> "RpuDataNlq":
        """Read NLQ parameters as described by the header."""
        count = _pivot_count(header)
        denom_length = _coefficient_length(header)

        data = cls(
            num_nlq_param_predictors=[_zeros() for _ in range(count)],
            nlq_param_pred_flag=[[False] * NUM_COMPONENTS for _ in range(count)],
        )

        for pivot_idx in range(count):
            for cmp in range(NUM_COMPONENTS):
                predictors = data.num_nlq_param_predictors[pivot_idx][cmp]
                flag = reader.get() if predictors > 0 else False
                data.nlq_param_pred_flag[pivot_idx][cmp] = flag

                if not flag:
                    data._parse_param(reader, header, pivot_idx, cmp, count, denom_length)
                elif predictors > 1:
                    _allocate(data.diff_pred_part_idx_nlq_minus1, count)
                    data.diff_pred_part_idx_nlq_minus1[pivot_idx][cmp] = reader.get_ue()

        return data

    def _parse_param(
        self,
        reader: BitReader,
        header: RpuDataHeader,
        pivot_idx: int,
        cmp: int,
        count: int,
        denom_length: int,
    ) -> None:
        has_int = header.coefficient_data_type == 0

        _allocate(self.nlq_offset, count)
        _allocate(self.vdr_in_max, count)

        self.nlq_offset[pivot_idx][cmp] = reader.get_n(header.el_bit_depth_minus8 + 8)

        if has_int:
            _allocate(self.vdr_in_max_int, count)
            self.vdr_in_max_int[pivot_idx][cmp] = reader.get_ue()

        self.vdr_in_max[pivot_idx][cmp] = reader.get_n(denom_length)

        if header.nlq_method_idc != _NLQ_LINEAR_DZ:
            return

        _allocate(self.linear_deadzone_slope, count)
        _allocate(self.linear_deadzone_threshold, count)

        if has_int:
            _allocate(self.linear_deadzone_slope_int, count)
            self.linear_deadzone_slope_int[pivot_idx][cmp] = reader.get_ue()

        self.linear_deadzone_slope[pivot_idx][cmp] = reader.get_n(denom_length)

        if has_int:
            _allocate(self.linear_deadzone_threshold_int, count)
            self.linear_deadzone_threshold_int[pivot_idx][cmp] = reader.get_ue()

        self.linear_deadzone_threshold[pivot_idx][cmp] = reader.get_n(denom_length)

    def convert_to_mel(self) -> None:
        """Neutralise the residual so the enhancement layer becomes MEL."""
        for values, neutral in (
            (self.nlq_offset, 0),
            (self.vdr_in_max_int, 1),
            (self.vdr_in_max, 0),
            (self.linear_deadzone_slope_int, 0),
            (self.linear_deadzone_slope, 0),
            (self.linear_deadzone_threshold_int, 0),
            (self.linear_deadzone_threshold, 0),
        ):
            for row in values:
                row[:] = [neutral] * len(row)

    def write(self, writer: BitWriter, header: RpuDataHeader) -> None:
        """Write NLQ parameters as described by the header."""
        count = _pivot_count(header)
        denom_length = _coefficient_length(header)
        has_int = header.coefficient_data_type == 0

        for pivot_idx in range(count):
            for cmp in range(NUM_COMPONENTS):
                predictors = self.num_nlq_param_predictors[pivot_idx][cmp]
                if predictors > 0:
                    writer.write(self.nlq_param_pred_flag[pivot_idx][cmp])

                if not self.nlq_param_pred_flag[pivot_idx][cmp]:
                    writer.write_n(
                        self.nlq_offset[pivot_idx][cmp], header.el_bit_depth_minus8 + 8
                    )

                    if has_int:
                        writer.write_ue(self.vdr_in_max_int[pivot_idx][cmp])

                    writer.write_n(self.vdr_in_max[pivot_idx][cmp], denom_length)

                    if header.nlq_method_idc == _NLQ_LINEAR_DZ:
                        if has_int:
                            writer.write_ue(self.linear_deadzone_slope_int[pivot_idx][cmp])

                        writer.write_n(
                            self.linear_deadzone_slope[pivot_idx][cmp], denom_length
                        )

                        # The slope integer part is written in place of the threshold's.
                        if has_int:
                            writer.write_ue(self.linear_deadzone_slope_int[pivot_idx][cmp])

                        writer.write_n(
                            self.linear_deadzone_threshold[pivot_idx][cmp], denom_length
                        )
                elif predictors > 1:
                    writer.write_ue(self.diff_pred_part_idx_nlq_minus1[pivot_idx][cmp])

    @classmethod
    def mel_default(cls) -> "RpuDataNlq":
        """NLQ parameters of a minimal enhancement layer."""
        return cls(
            num_nlq_param_predictors=[_zeros()],
            nlq_param_pred_flag=[[False] * NUM_COMPONENTS],
            diff_pred_part_idx_nlq_minus1=[_zeros()],
            nlq_offset=[_zeros()],
            vdr_in_max_int=[_ones()],
            vdr_in_max=[_zeros()],
            linear_deadzone_slope_int=[_zeros()],
            linear_deadzone_slope=[_zeros()],
            linear_deadzone_threshold_int=[_zeros()],
            linear_deadzone_threshold=[_zeros()],
        )

    def is_mel(self) -> bool:
        """Whether the parameters describe a minimal enhancement layer."""
        return (
            _all_equal(self.nlq_offset, 0)
            and _all_equal(self.vdr_in_max_int, 1)
            and _all_equal(self.vdr_in_max, 0)
            and _all_equal(self.linear_deadzone_slope_int, 0)
            and _all_equal(self.linear_deadzone_slope, 0)
            and _all_equal(self.linear_deadzone_threshold_int, 0)
            and _all_equal(self.linear_deadzone_threshold, 0)
        )