"""Field value model for ISO 8583 messages."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from ..codec.errors import ConfigurationError
from ..codec.iso_types import IsoType, encode_value, format_amount, format_date, parse_length


@dataclass
class FieldValue:
    """A typed value attached to a field number.

    ``length`` only matters for NUMERIC, ALPHA and BINARY. Date, time and
    amount kinds carry their width in the type; length-prefixed kinds take
    it from the content.
    """

    iso_type: IsoType
    value: str
    length: int | None = None

    @property
    def width(self) -> int | None:
        """Wire width of the value, or None for length-prefixed kinds."""
        if self.iso_type.needs_length:
            return self.length
        return self.iso_type.implicit_length

    def encode(self, field: int | None = None) -> str:
        """Encode to wire text.

        Args:
            field: Field number used in error messages

        Returns:
            Padded, truncated or length-prefixed text
        """
        return encode_value(self.iso_type, self.value, self.length, field)

    @classmethod
    def numeric(cls, value: str | int, length: int) -> "FieldValue":
        return cls(IsoType.NUMERIC, str(value), length)

    @classmethod
    def alpha(cls, value: str, length: int) -> "FieldValue":
        return cls(IsoType.ALPHA, value, length)

    @classmethod
    def binary(cls, value: str, length: int) -> "FieldValue":
        return cls(IsoType.BINARY, value, length)

    @classmethod
    def llvar(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLVAR, value)

    @classmethod
    def lllvar(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLLVAR, value)

    @classmethod
    def llllvar(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLLLVAR, value)

    @classmethod
    def llbin(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLBIN, value)

    @classmethod
    def lllbin(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLLBIN, value)

    @classmethod
    def llllbin(cls, value: str) -> "FieldValue":
        return cls(IsoType.LLLLBIN, value)

    @classmethod
    def from_datetime(cls, iso_type: IsoType, value: datetime) -> "FieldValue":
        """Create a date or time value from a datetime.

        Args:
            iso_type: One of the DATE*, DATE_EXP or TIME kinds
            value: Datetime to render

        Returns:
            FieldValue holding the formatted digits
        """
        return cls(iso_type, format_date(iso_type, value))

    @classmethod
    def amount(cls, value: Decimal | int | str) -> "FieldValue":
        """Create an AMOUNT value from a decimal amount in major units."""
        return cls(IsoType.AMOUNT, format_amount(value))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        result: dict[str, Any] = {"type": self.iso_type.name, "value": self.value}
        if self.length is not None:
            result["length"] = self.length
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any], field: int | None = None) -> "FieldValue":
        """Create from a dictionary as produced by ``to_dict``.

        Args:
            data: {"type": ..., "value": ..., "length": ...}
            field: Field number for error messages

        Raises:
            ConfigurationError: Not an object with a "type", a value that is
                not text or a number, or an invalid length
            UnknownTypeError: Unknown type tag
        """
        where = f"Field {field}" if field is not None else "Field value"
        if not isinstance(data, dict) or "type" not in data:
            raise ConfigurationError(f"{where} must be an object with a 'type'", field=field)
        value = data.get("value", "")
        if isinstance(value, (dict, list, bool)) or value is None:
            raise ConfigurationError(f"{where} has an invalid value: {value!r}", field=field)
        return cls(
            iso_type=IsoType.from_name(data["type"]),
            value=str(value),
            length=parse_length(data.get("length"), field),
        )

    def format_value(self, max_length: int = 100) -> str:
        """Format value for display.

        Args:
            max_length: Maximum string length before truncation

        Returns:
            Formatted string representation
        """
        if len(self.value) > max_length:
            return self.value[:max_length] + "..."
        return self.value
