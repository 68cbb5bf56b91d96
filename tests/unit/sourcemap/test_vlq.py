"""Tests for the base64 VLQ codec."""

import pytest

from txgen.sourcemap import VLQDecodeError, decode_mappings, decode_vlq, encode_vlq
from txgen.sourcemap.vlq import from_vlq_signed, to_vlq_signed


class TestSignedMapping:
    """Test zig-zag mapping of signed integers."""

    @pytest.mark.parametrize("value, mapped", [(0, 0), (1, 2), (-1, 3), (2, 4), (-2, 5)])
    def test_to_vlq_signed(self, value, mapped):
        """Test v >= 0 -> 2v and v < 0 -> 2|v| + 1."""
        assert to_vlq_signed(value) == mapped
        assert from_vlq_signed(mapped) == value


class TestEncodeVlq:
    """Test encoding of single values."""

    @pytest.mark.parametrize(
        "value, encoded",
        [(0, "A"), (1, "C"), (-1, "D"), (15, "e"), (16, "gB"), (-16, "hB"), (123, "2H"), (1000, "w+B")],
    )
    def test_known_values(self, value, encoded):
        """Test values against the standard source map encoding."""
        assert encode_vlq(value) == encoded

    def test_decode_inverts_encode(self):
        """Test decoding a concatenation of encoded values."""
        values = [0, 1, -1, 16, -16, 123, 100000, -987654]

        assert decode_vlq("".join(encode_vlq(v) for v in values)) == values


class TestDecodeErrors:
    """Test malformed input."""

    def test_invalid_character(self):
        """Test that characters outside the base64 alphabet are rejected."""
        with pytest.raises(VLQDecodeError):
            decode_vlq("A!")

    def test_truncated_value(self):
        """Test that a trailing continuation digit is rejected."""
        with pytest.raises(VLQDecodeError):
            decode_vlq("g")

    def test_bad_segment_length(self):
        """Test that segments with 2 or 3 fields are rejected."""
        with pytest.raises(VLQDecodeError):
            decode_mappings("AA")


class TestDecodeMappings:
    """Test decoding of whole mappings strings."""

    def test_absolute_positions(self):
        """Test that deltas are accumulated across segments and lines."""
        decoded = decode_mappings("AAAAA,ICCGC;ADDHD")

        assert decoded == [
            (1, 0, 0, 0, 0, 0),
            (1, 4, 1, 1, 3, 1),
            (2, 0, 0, 0, 0, 0),
        ]

    def test_empty_lines(self):
        """Test that bare semicolons skip generated lines."""
        assert decode_mappings(";;E") == [(3, 2)]
