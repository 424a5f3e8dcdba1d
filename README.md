# dovirpu

`dovirpu` is a pure Python library for reading and writing the building
blocks of Dolby Vision RPU (reference processing unit) metadata, and for
parsing ST 2094-10 content mapping data carried in ITU-T T.35 payloads.
It has no dependencies outside the standard library.

## What it offers

- `dovirpu.bitstream`
  - `BitReader(data)`: MSB-first reading with `get()`, `get_n(n)`,
    `get_ue()`, `get_se()` and `available()`.
  - `BitWriter()`: `write(bit)`, `write_n(value, n)`, `write_ue(value)`,
    `write_se(value)` and `as_bytes()` (zero-padded to a whole byte).
- `dovirpu.rpu_data_header.RpuDataHeader`: `parse(reader)`,
  `write_header(writer)`, `validate(profile)` for profiles 5, 7 and 8,
  `get_dovi_profile()`, and the `p5_default()` / `p8_default()` headers.
- `dovirpu.rpu_data_mapping.RpuDataMapping`: polynomial, linear
  interpolation and MMR prediction parameters; `parse(reader, header)`,
  `write(writer, header)` and `set_empty_p81_mapping()`.
- `dovirpu.rpu_data_nlq.RpuDataNlq`: NLQ (enhancement layer) parameters;
  `parse(reader, header)`, `write(writer, header)`, `mel_default()`,
  `convert_to_mel()` and `is_mel()`.
- `dovirpu.vdr_dm_data`
  - `VdrDmData`: colour conversion coefficients and signal description;
    `parse(reader)`, `parse_compressed(reader)`, `write(writer)`,
    `validate()`, `set_p81_coeffs()`, `set_scene_cut(flag)`,
    `default_pq()` and `field_names()`.
  - `CmVersion`: content mapping version (`V29`, `V40`).
- `dovirpu.profiles`: `DoviProfile` and its subclasses `Profile4`,
  `Profile5`, `Profile7`, `Profile81` and `Profile84`, each with
  `dm_data()` and `backwards_compatible()`; `Profile81.rpu_data_mapping()`,
  `Profile84.rpu_data_header()` and `Profile84.rpu_data_mapping()` give the
  default identity mapping and the static HLG reshaping.
- `dovirpu.st2094_10`: `ST2094_10ItuT35.parse_itu_t35_dashif(data)` checks
  the start bytes (with or without a 4-byte SEI header, via
  `validated_trimmed_data(data)`), removes emulation prevention bytes and
  parses content mapping data into `ST2094_10CmData`.
- `dovirpu.utils`: `nits_to_pq(nits)`,
  `clear_start_code_emulation_prevention_3_byte(data)`,
  `add_start_code_emulation_prevention_3_byte(data)`,
  `compute_crc32(data)` (CRC-32/MPEG-2), the `ConversionMode` enum with
  `conversion_mode_from_int(mode)`, and the `DoviError` exception.

Malformed bitstreams and failed validation raise `dovirpu.utils.DoviError`.

## Example

```python
from dovirpu.bitstream import BitReader, BitWriter
from dovirpu.rpu_data_header import RpuDataHeader
from dovirpu.utils import nits_to_pq

header = RpuDataHeader.p8_default()
writer = BitWriter()
header.write_header(writer)

parsed = RpuDataHeader.parse(BitReader(writer.as_bytes()))
assert parsed.get_dovi_profile() == 8
parsed.validate(8)

print(round(nits_to_pq(1000.0) * 4095))
```

## What it does not do

- It does not parse or write complete RPU NAL units, nor read RPU files;
  only the header, mapping, NLQ and DM data parts are handled separately.
- `VdrDmData` covers the base DM parameters only; CM v2.9 / v4.0
  extension metadata blocks (L1, L2, L5, L6 and so on) are not handled.
- It does not generate RPU lists from shot configurations.
- ST 2094-10 display management payloads (`user_data_type_code` 9) are
  rejected with `DoviError`; only content mapping data is parsed.
- There is no command-line tool.

## Installation

```
pip install .
```

## Tests

```
pip install .[test]
pytest
```