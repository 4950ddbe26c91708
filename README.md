# iccarus

A pure-Python reader for the parts of ICC colour profiles (`.icc` / `.icm`):
the 128-byte header, the tag table, and the common tag types (curves,
parametric curves, matrices, colour lookup tables, `mft1` / `mft2`
multi-function tables, `mAB` / `mBA` modular tags, text, descriptions,
multi-localized Unicode strings, signatures, XYZ values, `sf32` arrays,
measurement and viewing conditions).

No third-party libraries are needed.

## Installing

```
pip install iccarus
```

## Reading a profile

A profile is read from a binary stream in three steps, each continuing
where the previous one stopped:

```python
from iccarus.header import parse_header
from iccarus.tag_headers import parse_tag_headers
from iccarus.tags import ParseOptions, parse_tags

with open("profile.icc", "rb") as stream:
    header = parse_header(stream)
    table = parse_tag_headers(stream)
    tags = parse_tags(stream, table, ParseOptions())

print("Color space:", header.color_space)
print("    Version:", header.version)

by_header = {entry.name: tag for tag in tags for entry in tag.headers}
print("  Copyright:", by_header["cprt"].value())
```

- `parse_header` returns a `Header` (profile size, CMM type, `Version`,
  device class, colour space, PCS, creation time, platform, flags,
  rendering intent, illuminant, creator, profile ID, ...). It raises
  `ICCError` if the `acsp` signature is missing.
- `parse_tag_headers` returns a `TagHeaderTable` of `TagHeader` entries
  (name, offset, size); more than 1024 entries is an error.
- `parse_tags` reads the tag blocks in offset order and returns a list of
  `Tag` objects. Table entries that point at the same offset share one
  `Tag`, whose `headers` lists all of them. Tags must lie forward of one
  another in the stream.

Names for tag types and tag table entries are available as constants in
`iccarus.common` (for example `TAG_TEXT` and `TAG_HEADER_COPYRIGHT`).

## Parse options

`iccarus.tags.ParseOptions` has these fields:

- `lazy_tag_decode` – defer decoding until `Tag.value()` is first called;
- `error_on_unknown_tags` – make a tag type with no decoder fail the parse
  instead of being recorded on the tag;
- `error_on_tag_decode` – make a decoding failure fail the parse (eager
  decoding only);
- `tag_decoders` – a mapping from tag type signature to a decoder
  function, adding to or overriding the built-in ones in
  `iccarus.tags.DEFAULT_DECODERS`; mapping a signature to `None` removes
  its decoder;
- `mode` – a `ParseMode` value (`FULL`, `HEADER_AND_TAG_HEADER_TABLE`,
  `HEADER_ONLY`) for callers to decide how many of the steps above to run;
  `parse_tags` itself does not look at it.

`Tag.value()` returns the decoded value, or raises the error recorded for
the tag.

## Decoding individual tags

Every decoder takes the raw tag bytes, type signature included:
`decode_curve`, `decode_parametric_curve` (`iccarus.tags_curve`),
`decode_matrix` (`iccarus.tags_matrix`), `decode_clut`
(`iccarus.tags_clut`), `decode_mft1`, `decode_mft2` (`iccarus.tags_mft`),
`decode_modular` (`iccarus.tags`), `decode_desc`, `decode_text`,
`decode_sig`, `decode_mluc` (`iccarus.tags_text`), and `decode_xyz`,
`decode_measurement`, `decode_view`, `decode_sf32` (`iccarus.tags_misc`).
Dictionary, profile-sequence, gamut-boundary and vendor tags (`dict`,
`psid`, `pseq`, `gbd`, `ZXML`, `MSBN`) are returned as their raw bytes.

## Converting colours

`CurveTag`, `ParametricCurveTag`, `MatrixTag`, `CLUTTag`, `MFT1Tag` and
`MFT2Tag` each have a `transform(*channels)` method. A `ModularTag` (from
an `mAB` / `mBA` tag such as `A2B0` or `B2A0`) runs channel values through
its curve, parametric-curve, matrix and CLUT elements in order:

```python
a2b0 = by_header["A2B0"].value()
pcs = a2b0.to_ciexyz(0.1, 0.2, 0.3, 0.4)
```

`from_ciexyz` does the same for the reverse direction.

## What is not included

- There is no single call that parses a whole profile into one object with
  tag lookups by name; the three steps above are chained by hand.
- Profiles embedded in JPEG, TIFF, PNG or WebP images cannot be extracted;
  only profile data that is already a stream of its own can be read.
- There is no command-line tool.

## Errors

Malformed data, unknown tags (when asked to fail on them) and wrong channel
counts raise `ICCError` (from `iccarus.common`) with a message describing
the problem.

## Running the tests

```
pip install -e ".[test]"
pytest
```