"""Tests for ISO field types and value rules."""

from datetime import datetime
from decimal import Decimal

import pytest
from isocodec.codec.decoder import IsoReader
from isocodec.codec.errors import (
    CapacityOverflowError,
    ConfigurationError,
    MalformedInputError,
    UnknownTypeError,
)
from isocodec.codec.iso_types import (
    DATE_FORMATS,
    IMPLICIT_LENGTHS,
    PREFIX_DIGITS,
    DECLARED_LENGTH_TYPES,
    IsoType,
    decode_value,
    encode_value,
    format_amount,
    format_date,
)


class TestIsoTypeAttributes:
    """Test per-type constants."""

    def test_seventeen_kinds(self):
        assert len(IsoType) == 17

    def test_every_kind_has_one_framing(self):
        """Each kind is exactly one of declared, implicit or prefixed."""
        for t in IsoType:
            framings = [
                t in DECLARED_LENGTH_TYPES,
                t in IMPLICIT_LENGTHS,
                t in PREFIX_DIGITS,
            ]
            assert framings.count(True) == 1, t

    def test_needs_length(self):
        assert IsoType.NUMERIC.needs_length
        assert IsoType.ALPHA.needs_length
        assert IsoType.BINARY.needs_length
        assert not IsoType.AMOUNT.needs_length
        assert not IsoType.LLVAR.needs_length

    def test_implicit_lengths(self):
        assert IsoType.DATE14.implicit_length == 14
        assert IsoType.DATE12.implicit_length == 12
        assert IsoType.DATE10.implicit_length == 10
        assert IsoType.DATE6.implicit_length == 6
        assert IsoType.DATE4.implicit_length == 4
        assert IsoType.DATE_EXP.implicit_length == 4
        assert IsoType.TIME.implicit_length == 6
        assert IsoType.AMOUNT.implicit_length == 12
        assert IsoType.NUMERIC.implicit_length is None

    def test_prefix_digits(self):
        assert IsoType.LLVAR.prefix_digits == 2
        assert IsoType.LLBIN.prefix_digits == 2
        assert IsoType.LLLVAR.prefix_digits == 3
        assert IsoType.LLLBIN.prefix_digits == 3
        assert IsoType.LLLLVAR.prefix_digits == 4
        assert IsoType.LLLLBIN.prefix_digits == 4
        assert IsoType.ALPHA.prefix_digits is None

    def test_numeric_like(self):
        assert IsoType.NUMERIC.is_numeric_like
        assert IsoType.AMOUNT.is_numeric_like
        assert IsoType.TIME.is_numeric_like
        assert not IsoType.ALPHA.is_numeric_like
        assert not IsoType.BINARY.is_numeric_like

    def test_from_name(self):
        assert IsoType.from_name("llvar") is IsoType.LLVAR
        assert IsoType.from_name("DATE_EXP") is IsoType.DATE_EXP
        assert IsoType.from_name(" Amount ") is IsoType.AMOUNT

    def test_from_name_unknown(self):
        with pytest.raises(UnknownTypeError, match="Unknown field type"):
            IsoType.from_name("LLLLLVAR")


class TestEncodeFixed:
    """Test fixed-width encoding and truncation."""

    def test_numeric_pads_left(self):
        assert encode_value(IsoType.NUMERIC, "42", 6) == "000042"

    def test_numeric_keeps_trailing_digits(self):
        assert encode_value(IsoType.NUMERIC, "1234567", 4) == "4567"

    def test_numeric_exact_width_unchanged(self):
        assert encode_value(IsoType.NUMERIC, "650000", 6) == "650000"

    def test_alpha_pads_right(self):
        assert encode_value(IsoType.ALPHA, "AB", 5) == "AB   "

    def test_alpha_keeps_leading_chars(self):
        assert encode_value(IsoType.ALPHA, "TERMINAL01", 8) == "TERMINAL"

    def test_binary_pads_with_zero_chars(self):
        assert encode_value(IsoType.BINARY, "ABCDEF", 8) == "ABCDEF00"

    def test_binary_keeps_leading_chars(self):
        assert encode_value(IsoType.BINARY, "0102030405", 4) == "0102"

    @pytest.mark.parametrize("iso_type", [IsoType.NUMERIC, IsoType.ALPHA, IsoType.BINARY])
    def test_missing_length_raises(self, iso_type):
        with pytest.raises(ConfigurationError, match="positive length"):
            encode_value(iso_type, "1", None)
        with pytest.raises(ConfigurationError):
            encode_value(iso_type, "1", 0)

    def test_error_names_field(self):
        with pytest.raises(ConfigurationError, match="field 41") as exc:
            encode_value(IsoType.ALPHA, "X", None, field=41)
        assert exc.value.field == 41

    def test_amount_pads(self):
        assert encode_value(IsoType.AMOUNT, "1000") == "000000001000"

    def test_amount_ignores_length(self):
        assert encode_value(IsoType.AMOUNT, "1000", 3) == "000000001000"

    def test_date_truncates_leading(self):
        assert encode_value(IsoType.DATE4, "20240307") == "0307"

    def test_semantic_idempotent_at_width(self):
        for t, width in IMPLICIT_LENGTHS.items():
            value = "9" * width
            assert encode_value(t, value) == value
            assert encode_value(t, encode_value(t, value)) == value


class TestEncodeVariable:
    """Test length-prefixed encoding."""

    def test_llvar(self):
        assert encode_value(IsoType.LLVAR, "HELLO") == "05HELLO"

    def test_lllvar(self):
        assert encode_value(IsoType.LLLVAR, "DATA") == "004DATA"

    def test_llllbin(self):
        assert encode_value(IsoType.LLLLBIN, "A1B2C3") == "0006A1B2C3"

    def test_empty(self):
        assert encode_value(IsoType.LLVAR, "") == "00"

    def test_at_capacity(self):
        assert encode_value(IsoType.LLBIN, "x" * 99) == "99" + "x" * 99

    @pytest.mark.parametrize("iso_type,size", [
        (IsoType.LLVAR, 100),
        (IsoType.LLBIN, 100),
        (IsoType.LLLVAR, 1000),
        (IsoType.LLLBIN, 1000),
        (IsoType.LLLLVAR, 10000),
        (IsoType.LLLLBIN, 10000),
    ])
    def test_over_capacity_raises(self, iso_type, size):
        with pytest.raises(CapacityOverflowError):
            encode_value(iso_type, "x" * size)

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownTypeError):
            encode_value("LLVAR", "abc")


class TestDecodeValue:
    """Test reading values from a cursor."""

    def test_numeric_verbatim(self):
        assert decode_value(IsoType.NUMERIC, IsoReader("000042"), 6) == "000042"

    def test_alpha_strips_trailing_spaces(self):
        assert decode_value(IsoType.ALPHA, IsoReader("AB   "), 5) == "AB"

    def test_alpha_keeps_leading_spaces(self):
        assert decode_value(IsoType.ALPHA, IsoReader("  AB "), 5) == "  AB"

    def test_binary_not_stripped(self):
        assert decode_value(IsoType.BINARY, IsoReader("ABCDEF00"), 8) == "ABCDEF00"

    def test_implicit_width(self):
        reader = IsoReader("0000000010001234")
        assert decode_value(IsoType.AMOUNT, reader) == "000000001000"
        assert reader.remaining == 4

    def test_prefixed(self):
        reader = IsoReader("004DATAxyz")
        assert decode_value(IsoType.LLLVAR, reader) == "DATA"
        assert reader.remaining == 3

    def test_bad_prefix(self):
        with pytest.raises(MalformedInputError, match="Invalid length prefix"):
            decode_value(IsoType.LLVAR, IsoReader("X5HELLO"), field=2)

    def test_signed_prefix_rejected(self):
        with pytest.raises(MalformedInputError):
            decode_value(IsoType.LLLVAR, IsoReader("+05HELLO"))

    def test_short_payload(self):
        with pytest.raises(MalformedInputError, match="Insufficient data for field 48"):
            decode_value(IsoType.LLLVAR, IsoReader("010ABC"), field=48)

    def test_short_prefix(self):
        with pytest.raises(MalformedInputError, match="length prefix"):
            decode_value(IsoType.LLLLVAR, IsoReader("00"))

    def test_missing_length(self):
        with pytest.raises(ConfigurationError):
            decode_value(IsoType.NUMERIC, IsoReader("123"))


class TestFormatting:
    """Test date and amount helpers."""

    def test_dates(self):
        dt = datetime(2024, 3, 7, 14, 5, 9)
        assert format_date(IsoType.DATE14, dt) == "20240307140509"
        assert format_date(IsoType.DATE12, dt) == "240307140509"
        assert format_date(IsoType.DATE10, dt) == "0307140509"
        assert format_date(IsoType.DATE6, dt) == "240307"
        assert format_date(IsoType.DATE4, dt) == "0307"
        assert format_date(IsoType.DATE_EXP, dt) == "2403"
        assert format_date(IsoType.TIME, dt) == "140509"

    def test_date_formats_match_widths(self):
        dt = datetime(2024, 12, 31, 23, 59, 59)
        for t, fmt in DATE_FORMATS.items():
            assert len(dt.strftime(fmt)) == t.implicit_length

    def test_non_date_type(self):
        with pytest.raises(UnknownTypeError):
            format_date(IsoType.AMOUNT, datetime(2024, 1, 1))

    def test_amount(self):
        assert format_amount(Decimal("10.00")) == "000000001000"
        assert format_amount("1234.5") == "000000123450"
        assert format_amount(7) == "000000000700"

    def test_negative_amount(self):
        with pytest.raises(ValueError):
            format_amount("-1.00")

    def test_amount_not_a_number(self):
        with pytest.raises(ValueError, match="Invalid amount"):
            format_amount("abc")
