"""ISO 8583 field types and their wire rules.

Every field kind falls into one of three framings:

- fixed width with a declared length (NUMERIC, ALPHA, BINARY)
- fixed width with a length implied by the type (dates, TIME, AMOUNT)
- variable width with a 2, 3 or 4 digit decimal length prefix (LL*, LLL*, LLLL*)

Fixed-width values are padded or truncated silently. Numeric-like kinds keep
the trailing (least significant) digits, text and binary kinds keep the
leading characters.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum, auto
from typing import Any, Protocol

from .errors import CapacityOverflowError, ConfigurationError, UnknownTypeError


class IsoType(Enum):
    """Type of an ISO 8583 field."""

    NUMERIC = auto()
    ALPHA = auto()
    LLVAR = auto()
    LLLVAR = auto()
    LLLLVAR = auto()
    LLBIN = auto()
    LLLBIN = auto()
    LLLLBIN = auto()
    BINARY = auto()
    DATE14 = auto()
    DATE12 = auto()
    DATE10 = auto()
    DATE6 = auto()
    DATE4 = auto()
    DATE_EXP = auto()
    TIME = auto()
    AMOUNT = auto()

    @classmethod
    def from_name(cls, name: str) -> "IsoType":
        """Look up a type by its tag, ignoring case.

        Raises:
            UnknownTypeError: If the tag is not a known type
        """
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise UnknownTypeError(f"Unknown field type: {name!r}") from None

    @property
    def needs_length(self) -> bool:
        """True for the kinds that require a declared length."""
        return self in DECLARED_LENGTH_TYPES

    @property
    def implicit_length(self) -> int | None:
        """Width baked into the type, or None."""
        return IMPLICIT_LENGTHS.get(self)

    @property
    def prefix_digits(self) -> int | None:
        """Number of decimal digits in the length prefix, or None."""
        return PREFIX_DIGITS.get(self)

    @property
    def is_variable(self) -> bool:
        """True for the length-prefixed kinds."""
        return self in PREFIX_DIGITS

    @property
    def is_numeric_like(self) -> bool:
        """True when over-long values keep their trailing digits."""
        return self is IsoType.NUMERIC or self in IMPLICIT_LENGTHS


DECLARED_LENGTH_TYPES = frozenset({IsoType.NUMERIC, IsoType.ALPHA, IsoType.BINARY})

IMPLICIT_LENGTHS = {
    IsoType.DATE14: 14,
    IsoType.DATE12: 12,
    IsoType.DATE10: 10,
    IsoType.DATE6: 6,
    IsoType.DATE4: 4,
    IsoType.DATE_EXP: 4,
    IsoType.TIME: 6,
    IsoType.AMOUNT: 12,
}

PREFIX_DIGITS = {
    IsoType.LLVAR: 2,
    IsoType.LLLVAR: 3,
    IsoType.LLLLVAR: 4,
    IsoType.LLBIN: 2,
    IsoType.LLLBIN: 3,
    IsoType.LLLLBIN: 4,
}

# strftime layouts for the date and time kinds
DATE_FORMATS = {
    IsoType.DATE14: "%Y%m%d%H%M%S",
    IsoType.DATE12: "%y%m%d%H%M%S",
    IsoType.DATE10: "%m%d%H%M%S",
    IsoType.DATE6: "%y%m%d",
    IsoType.DATE4: "%m%d",
    IsoType.DATE_EXP: "%y%m",
    IsoType.TIME: "%H%M%S",
}


class TextReader(Protocol):
    """Cursor interface used by ``decode_value``."""

    def read_text(self, count: int, what: str) -> str: ...

    def read_length_prefix(self, digits: int, what: str) -> int: ...


def _check_type(iso_type, field: int | None = None) -> IsoType:
    if not isinstance(iso_type, IsoType):
        where = f" in field {field}" if field is not None else ""
        raise UnknownTypeError(f"Unsupported field type: {iso_type!r}{where}", field=field)
    return iso_type


def resolve_length(iso_type: IsoType, length: int | None, field: int | None = None) -> int | None:
    """Return the wire width of a fixed-width kind.

    Args:
        iso_type: Field type
        length: Declared length (used only by NUMERIC, ALPHA and BINARY)
        field: Field number for error messages

    Returns:
        Width in characters, or None for length-prefixed kinds

    Raises:
        ConfigurationError: If a declared length is required but missing
    """
    iso_type = _check_type(iso_type, field)
    if iso_type in DECLARED_LENGTH_TYPES:
        if length is None or length <= 0:
            where = f" for field {field}" if field is not None else ""
            raise ConfigurationError(
                f"{iso_type.name} requires a positive length{where}", field=field
            )
        return length
    return IMPLICIT_LENGTHS.get(iso_type)


def parse_length(value: Any, field: int | None = None) -> int | None:
    """Read a declared length from configuration or JSON input.

    Accepts None, an int (not a bool) or a string of ASCII digits.

    Raises:
        ConfigurationError: Any other value
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    where = f" for field {field}" if field is not None else ""
    raise ConfigurationError(f"Invalid length {value!r}{where}", field=field)


def pad_numeric(value: str, length: int) -> str:
    """Zero-pad on the left, or keep the trailing ``length`` characters."""
    if len(value) > length:
        return value[len(value) - length:]
    return value.rjust(length, "0")


def pad_alpha(value: str, length: int) -> str:
    """Space-pad on the right, or keep the leading ``length`` characters."""
    if len(value) > length:
        return value[:length]
    return value.ljust(length, " ")


def pad_binary(value: str, length: int) -> str:
    """Pad on the right with ASCII '0', or keep the leading ``length`` characters."""
    if len(value) > length:
        return value[:length]
    return value.ljust(length, "0")


def encode_value(
    iso_type: IsoType, value: str, length: int | None = None, field: int | None = None
) -> str:
    """Encode a field value to its wire text.

    Args:
        iso_type: Field type
        value: Logical content
        length: Declared length for NUMERIC, ALPHA and BINARY
        field: Field number for error messages

    Returns:
        Wire text for the field

    Raises:
        ConfigurationError: Declared length missing or not positive
        CapacityOverflowError: Content too long for the length prefix
        UnknownTypeError: ``iso_type`` is not an IsoType
    """
    iso_type = _check_type(iso_type, field)
    value = "" if value is None else str(value)

    digits = PREFIX_DIGITS.get(iso_type)
    if digits is not None:
        capacity = 10 ** digits - 1
        if len(value) > capacity:
            raise CapacityOverflowError(
                f"{iso_type.name} value of length {len(value)} exceeds {capacity}"
                + (f" in field {field}" if field is not None else ""),
                field=field,
            )
        return f"{len(value):0{digits}d}{value}"

    width = resolve_length(iso_type, length, field)
    if iso_type is IsoType.ALPHA:
        return pad_alpha(value, width)
    if iso_type is IsoType.BINARY:
        return pad_binary(value, width)
    return pad_numeric(value, width)


def decode_value(
    iso_type: IsoType, reader: TextReader, length: int | None = None, field: int | None = None
) -> str:
    """Read one field value from a decoder cursor.

    Args:
        iso_type: Field type from the specification table
        reader: Cursor positioned at the start of the field
        length: Declared length for NUMERIC, ALPHA and BINARY
        field: Field number for error messages

    Returns:
        Logical field content (ALPHA values have trailing spaces removed)
    """
    iso_type = _check_type(iso_type, field)
    what = f"field {field}" if field is not None else iso_type.name

    digits = PREFIX_DIGITS.get(iso_type)
    if digits is not None:
        size = reader.read_length_prefix(digits, what)
        return reader.read_text(size, what)

    width = resolve_length(iso_type, length, field)
    text = reader.read_text(width, what)
    if iso_type is IsoType.ALPHA:
        return text.rstrip(" ")
    return text


def format_date(iso_type: IsoType, value: datetime) -> str:
    """Render a datetime in the layout of a date or time kind."""
    fmt = DATE_FORMATS.get(_check_type(iso_type))
    if fmt is None:
        raise UnknownTypeError(f"{iso_type.name} is not a date or time type")
    return value.strftime(fmt)


def format_amount(amount: Decimal | int | str) -> str:
    """Render an amount as 12 digits of minor units (two implied decimals).

    Example: Decimal("10.00") -> "000000001000"
    """
    try:
        cents = int((Decimal(str(amount)) * 100).to_integral_value())
    except (InvalidOperation, OverflowError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if cents < 0:
        raise ValueError(f"Amount cannot be negative: {amount}")
    return pad_numeric(str(cents), IMPLICIT_LENGTHS[IsoType.AMOUNT])
