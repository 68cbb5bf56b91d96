"""Base64 VLQ codec used by source map v3 "mappings" strings.

Each signed integer is zig-zag mapped (v < 0 -> (-v << 1) + 1, else v << 1),
then emitted 5 bits at a time, least significant first. Every digit except
the last carries the continuation bit 0x20. Digits are written with the
standard base64 alphabet.
"""

BASE64_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

VLQ_BASE_SHIFT = 5
VLQ_BASE = 1 << VLQ_BASE_SHIFT
VLQ_BASE_MASK = VLQ_BASE - 1
VLQ_CONTINUATION_BIT = VLQ_BASE

_BASE64_VALUES = {char: index for index, char in enumerate(BASE64_CHARS)}


class VLQDecodeError(ValueError):
    """Raised when a mappings string is not valid base64 VLQ."""

    pass


def to_vlq_signed(value: int) -> int:
    """Zig-zag map a signed integer onto a non-negative one."""
    return ((-value) << 1) + 1 if value < 0 else value << 1


def from_vlq_signed(value: int) -> int:
    """Inverse of to_vlq_signed."""
    magnitude = value >> 1
    return -magnitude if value & 1 else magnitude


def encode_vlq(value: int) -> str:
    """Encode one signed integer as base64 VLQ.

    Args:
        value: Integer to encode

    Returns:
        Base64 VLQ digits (at least one character)
    """
    encoded = []
    vlq = to_vlq_signed(value)
    while True:
        digit = vlq & VLQ_BASE_MASK
        vlq >>= VLQ_BASE_SHIFT
        if vlq > 0:
            digit |= VLQ_CONTINUATION_BIT
        encoded.append(BASE64_CHARS[digit])
        if vlq == 0:
            return "".join(encoded)


def decode_vlq(segment: str) -> list[int]:
    """Decode a run of base64 VLQ digits into signed integers.

    Args:
        segment: One mappings segment (no ',' or ';')

    Returns:
        Decoded integers in order

    Raises:
        VLQDecodeError: On an unknown character or a truncated value
    """
    values: list[int] = []
    vlq = 0
    shift = 0
    pending = False
    for char in segment:
        digit = _BASE64_VALUES.get(char)
        if digit is None:
            raise VLQDecodeError(f"Invalid base64 VLQ character: {char!r}")
        vlq |= (digit & VLQ_BASE_MASK) << shift
        if digit & VLQ_CONTINUATION_BIT:
            shift += VLQ_BASE_SHIFT
            pending = True
            continue
        values.append(from_vlq_signed(vlq))
        vlq = 0
        shift = 0
        pending = False
    if pending:
        raise VLQDecodeError(f"Truncated base64 VLQ value in segment: {segment!r}")
    return values


def decode_mappings(mappings: str) -> list[tuple[int, ...]]:
    """Decode a complete mappings string into absolute positions.

    Args:
        mappings: Source map v3 "mappings" value

    Returns:
        One tuple per segment: (generated_line, generated_column) for
        segments without a source, (generated_line, generated_column,
        source_index, original_line, original_column) with a source, plus
        name_index when a name is present. Lines are 1-based, columns and
        original lines from the map are 0-based.

    Raises:
        VLQDecodeError: On malformed input
    """
    decoded: list[tuple[int, ...]] = []
    source = original_line = original_column = name = 0

    for line_index, line in enumerate(mappings.split(";")):
        generated_column = 0
        if not line:
            continue
        for segment in line.split(","):
            fields = decode_vlq(segment)
            if len(fields) not in (1, 4, 5):
                raise VLQDecodeError(f"Segment {segment!r} has {len(fields)} fields")
            generated_column += fields[0]
            if len(fields) == 1:
                decoded.append((line_index + 1, generated_column))
                continue
            source += fields[1]
            original_line += fields[2]
            original_column += fields[3]
            if len(fields) == 5:
                name += fields[4]
                decoded.append((line_index + 1, generated_column, source, original_line, original_column, name))
            else:
                decoded.append((line_index + 1, generated_column, source, original_line, original_column))
    return decoded
