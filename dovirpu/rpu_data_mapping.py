"""RPU data mapping: polynomial and MMR prediction parameters."""

from __future__ import annotations

from dataclasses import dataclass, field

from .bitstream import BitReader, BitWriter
from .rpu_data_header import RpuDataHeader
from .utils import NUM_COMPONENTS, DoviError

_MAPPING_POLYNOMIAL = 0
_MAPPING_MMR = 1
_MMR_COEF_COUNT = 7
_MAX_MMR_ORDER_MINUS1 = 2


def _per_component() -> list:
    return [[] for _ in range(NUM_COMPONENTS)]


def _coefficient_length(header: RpuDataHeader, message: str) -> int:
    if header.coefficient_data_type == 0:
        return header.coefficient_log2_denom
    if header.coefficient_data_type == 1:
        return 32
    raise DoviError(message)


def _ensure_size(values: list, size: int, default=0) -> None:
    if not values:
        values.extend(default for _ in range(size))


@dataclass
class RpuDataMapping:
    """Per-component, per-pivot prediction mapping parameters."""

    mapping_idc: list[list[int]] = field(default_factory=_per_component)
    mapping_param_pred_flag: list[list[bool]] = field(default_factory=_per_component)
    num_mapping_param_predictors: list[list[int]] = field(default_factory=_per_component)
    diff_pred_part_idx_mapping_minus1: list[list[int]] = field(
        default_factory=_per_component
    )
    poly_order_minus1: list[list[int]] = field(default_factory=_per_component)
    linear_interp_flag: list[list[bool]] = field(default_factory=_per_component)
    pred_linear_interp_value_int: list[list[int]] = field(default_factory=_per_component)
    pred_linear_interp_value: list[list[int]] = field(default_factory=_per_component)
    poly_coef_int: list[list[list[int]]] = field(default_factory=_per_component)
    poly_coef: list[list[list[int]]] = field(default_factory=_per_component)
    mmr_order_minus1: list[list[int]] = field(default_factory=_per_component)
    mmr_constant_int: list[list[int]] = field(default_factory=_per_component)
    mmr_constant: list[list[int]] = field(default_factory=_per_component)
    mmr_coef_int: list[list[list[list[int]]]] = field(default_factory=_per_component)
    mmr_coef: list[list[list[list[int]]]] = field(default_factory=_per_component)

    @classmethod
    def parse(cls, reader: BitReader, header: RpuDataHeader) -> "RpuDataMapping":
        """Read the mapping parameters described by the header."""
        denom_length = _coefficient_length(header, "Invalid coefficient_data_type value!")
        data = cls()
        for cmp in range(NUM_COMPONENTS):
            data._parse_component(reader, header, cmp, denom_length)
        return data

    def _parse_component(
        self, reader: BitReader, header: RpuDataHeader, cmp: int, denom_length: int
    ) -> None:
        count = header.num_pivots_minus_2[cmp] + 1

        mapping_idc = self.mapping_idc[cmp] = [0] * count
        predictors = self.num_mapping_param_predictors[cmp] = [0] * count
        pred_flags = self.mapping_param_pred_flag[cmp] = [False] * count

        for pivot_idx in range(count):
            mapping_idc[pivot_idx] = reader.get_ue()
            pred_flags[pivot_idx] = reader.get() if predictors[pivot_idx] > 0 else False

            if not pred_flags[pivot_idx]:
                if mapping_idc[pivot_idx] == _MAPPING_POLYNOMIAL:
                    self._parse_polynomial(
                        reader, header, cmp, pivot_idx, count, denom_length
                    )
                elif mapping_idc[pivot_idx] == _MAPPING_MMR:
                    self._parse_mmr(reader, header, cmp, pivot_idx, count, denom_length)
            elif predictors[pivot_idx] > 1:
                diff = self.diff_pred_part_idx_mapping_minus1[cmp]
                _ensure_size(diff, count)
                diff[pivot_idx] = reader.get_ue()

    def _parse_polynomial(
        self,
        reader: BitReader,
        header: RpuDataHeader,
        cmp: int,
        pivot_idx: int,
        count: int,
        denom_length: int,
    ) -> None:
        has_int = header.coefficient_data_type == 0

        orders = self.poly_order_minus1[cmp]
        _ensure_size(orders, count)
        orders[pivot_idx] = reader.get_ue()

        if orders[pivot_idx] == 0:
            flags = self.linear_interp_flag[cmp]
            _ensure_size(flags, count, False)
            flags[pivot_idx] = reader.get()

        if orders[pivot_idx] == 0 and self.linear_interp_flag[cmp][pivot_idx]:
            ints = self.pred_linear_interp_value_int[cmp]
            values = self.pred_linear_interp_value[cmp]
            # One extra slot holds the end value of the last pivot
            if not values:
                _ensure_size(ints, count + 1)
                _ensure_size(values, count + 1)

            if has_int:
                ints[pivot_idx] = reader.get_ue()
            values[pivot_idx] = reader.get_n(denom_length)

            if pivot_idx == header.num_pivots_minus_2[cmp]:
                if has_int:
                    ints[pivot_idx + 1] = reader.get_ue()
                values[pivot_idx + 1] = reader.get_n(denom_length)
        else:
            coef_ints = self.poly_coef_int[cmp]
            coefs = self.poly_coef[cmp]
            if not coef_ints:
                coef_ints.extend([] for _ in range(count))
                coefs.extend([] for _ in range(count))

            coef_count = orders[pivot_idx] + 2
            pivot_ints = coef_ints[pivot_idx] = [0] * coef_count
            pivot_coefs = coefs[pivot_idx] = [0] * coef_count

            for i in range(coef_count):
                if has_int:
                    pivot_ints[i] = reader.get_se()
                pivot_coefs[i] = reader.get_n(denom_length)

    def _parse_mmr(
        self,
        reader: BitReader,
        header: RpuDataHeader,
        cmp: int,
        pivot_idx: int,
        count: int,
        denom_length: int,
    ) -> None:
        has_int = header.coefficient_data_type == 0

        orders = self.mmr_order_minus1[cmp]
        if not orders:
            orders.extend(0 for _ in range(count))
            self.mmr_constant_int[cmp].extend(0 for _ in range(count))
            self.mmr_constant[cmp].extend(0 for _ in range(count))
            self.mmr_coef_int[cmp].extend([] for _ in range(count))
            self.mmr_coef[cmp].extend([] for _ in range(count))

        order = orders[pivot_idx] = reader.get_n(2)
        if order > _MAX_MMR_ORDER_MINUS1:
            raise DoviError(
                f"mmr_order_minus1 should be <= {_MAX_MMR_ORDER_MINUS1}, got {order}"
            )

        coef_ints = [[0] * _MMR_COEF_COUNT for _ in range(order + 2)]
        coefs = [[0] * _MMR_COEF_COUNT for _ in range(order + 2)]
        self.mmr_coef_int[cmp][pivot_idx] = coef_ints
        self.mmr_coef[cmp][pivot_idx] = coefs

        if has_int:
            self.mmr_constant_int[cmp][pivot_idx] = reader.get_se()
        self.mmr_constant[cmp][pivot_idx] = reader.get_n(denom_length)

        for row_ints, row in zip(coef_ints[1:], coefs[1:]):
            for j in range(_MMR_COEF_COUNT):
                if has_int:
                    row_ints[j] = reader.get_se()
                row[j] = reader.get_n(denom_length)

    def write(self, writer: BitWriter, header: RpuDataHeader) -> None:
        """Write the mapping parameters described by the header."""
        denom_length = _coefficient_length(
            header,
            f"Invalid coefficient_data_type value: {header.coefficient_data_type}",
        )
        has_int = header.coefficient_data_type == 0

        for cmp, mapping_idc in enumerate(self.mapping_idc):
            count = header.num_pivots_minus_2[cmp] + 1

            for pivot_idx, idc in enumerate(mapping_idc[:count]):
                writer.write_ue(idc)

                predictors = self.num_mapping_param_predictors[cmp][pivot_idx]
                if predictors > 0:
                    writer.write(self.mapping_param_pred_flag[cmp][pivot_idx])

                if not self.mapping_param_pred_flag[cmp][pivot_idx]:
                    if idc == _MAPPING_POLYNOMIAL:
                        self._write_polynomial(
                            writer, header, cmp, pivot_idx, denom_length, has_int
                        )
                    elif idc == _MAPPING_MMR:
                        self._write_mmr(writer, cmp, pivot_idx, denom_length, has_int)
                elif predictors > 1:
                    writer.write_ue(self.diff_pred_part_idx_mapping_minus1[cmp][pivot_idx])

    def _write_polynomial(
        self,
        writer: BitWriter,
        header: RpuDataHeader,
        cmp: int,
        pivot_idx: int,
        denom_length: int,
        has_int: bool,
    ) -> None:
        order = self.poly_order_minus1[cmp][pivot_idx]
        writer.write_ue(order)

        if order == 0:
            writer.write(self.linear_interp_flag[cmp][pivot_idx])

        if order == 0 and self.linear_interp_flag[cmp][pivot_idx]:
            ints = self.pred_linear_interp_value_int[cmp]
            values = self.pred_linear_interp_value[cmp]

            if has_int:
                writer.write_ue(ints[pivot_idx])
            writer.write_n(values[pivot_idx], denom_length)

            if pivot_idx == header.num_pivots_minus_2[cmp]:
                if has_int:
                    writer.write_ue(ints[pivot_idx + 1])
                writer.write_n(values[pivot_idx + 1], denom_length)
        else:
            coef_ints = self.poly_coef_int[cmp][pivot_idx]
            coefs = self.poly_coef[cmp][pivot_idx]
            for i in range(order + 2):
                if has_int:
                    writer.write_se(coef_ints[i])
                writer.write_n(coefs[i], denom_length)

    def _write_mmr(
        self,
        writer: BitWriter,
        cmp: int,
        pivot_idx: int,
        denom_length: int,
        has_int: bool,
    ) -> None:
        order = self.mmr_order_minus1[cmp][pivot_idx]
        writer.write_n(order, 2)

        if has_int:
            writer.write_se(self.mmr_constant_int[cmp][pivot_idx])
        writer.write_n(self.mmr_constant[cmp][pivot_idx], denom_length)

        coef_ints = self.mmr_coef_int[cmp][pivot_idx]
        coefs = self.mmr_coef[cmp][pivot_idx]
        for i in range(1, order + 2):
            for j in range(_MMR_COEF_COUNT):
                if has_int:
                    writer.write_se(coef_ints[i][j])
                writer.write_n(coefs[i][j], denom_length)

    def set_empty_p81_mapping(self) -> None:
        """Replace the mapping with an identity polynomial for profile 8.1."""
        self.mapping_idc = [[0] for _ in range(NUM_COMPONENTS)]
        self.mapping_param_pred_flag = [[False] for _ in range(NUM_COMPONENTS)]
        self.num_mapping_param_predictors = [[0] for _ in range(NUM_COMPONENTS)]
        self.diff_pred_part_idx_mapping_minus1 = [[0] for _ in range(NUM_COMPONENTS)]
        self.poly_order_minus1 = [[0] for _ in range(NUM_COMPONENTS)]
        self.linear_interp_flag = [[False] for _ in range(NUM_COMPONENTS)]
        self.pred_linear_interp_value_int = _per_component()
        self.pred_linear_interp_value = _per_component()
        self.poly_coef_int = [[[0, 1]] for _ in range(NUM_COMPONENTS)]
        self.poly_coef = [[[0, 0]] for _ in range(NUM_COMPONENTS)]
        self.mmr_order_minus1 = _per_component()
        self.mmr_constant_int = _per_component()
        self.mmr_constant = _per_component()
        self.mmr_coef_int = _per_component()
        self.mmr_coef = _per_component()