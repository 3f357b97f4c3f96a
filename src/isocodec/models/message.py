"""Message model for ISO 8583 messages."""

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from ..codec.errors import ConfigurationError, FieldRangeError
from .field import FieldValue


@dataclass
class Message:
    """A message-type indicator plus a sparse set of numbered fields.

    Fields may be set in any order and overwritten freely; the encoder
    sorts them by number.
    """

    mti: str
    fields: dict[int, FieldValue] = field(default_factory=dict)

    def set_field(self, number: int, value: FieldValue) -> "Message":
        """Set or replace a field. Returns self for chaining."""
        self.fields[number] = value
        return self

    def set_fields(self, values: Mapping[int, FieldValue]) -> "Message":
        """Set several fields at once."""
        for number, value in values.items():
            self.set_field(number, value)
        return self

    def get_field(self, number: int) -> FieldValue | None:
        """Get a field by number.

        Args:
            number: Field number

        Returns:
            FieldValue or None if not present
        """
        return self.fields.get(number)

    def get_value(self, number: int) -> str | None:
        """Get the logical content of a field, or None."""
        value = self.fields.get(number)
        return value.value if value is not None else None

    def has_field(self, number: int) -> bool:
        return number in self.fields

    def has_every_field(self, *numbers: int) -> bool:
        """True if all the given fields are present."""
        return all(self.has_field(n) for n in numbers)

    def has_any_field(self, *numbers: int) -> bool:
        """True if at least one of the given fields is present."""
        return any(self.has_field(n) for n in numbers)

    def remove_fields(self, *numbers: int) -> None:
        """Remove fields; numbers that are not present are ignored."""
        for n in numbers:
            self.fields.pop(n, None)

    def copy_fields_from(self, source: "Message", *numbers: int) -> None:
        """Copy fields from another message.

        Fields missing from ``source`` are skipped.
        """
        for n in numbers:
            value = source.get_field(n)
            if value is None:
                continue
            self.fields[n] = FieldValue(value.iso_type, value.value, value.length)

    def create_response(self, copy_all_fields: bool = True) -> "Message":
        """Create a response to this message.

        The response type adds 0x10 to the message type (0200 -> 0210,
        0800 -> 0810). Copied fields are new FieldValue objects, so the
        response can be changed without touching the request.

        Args:
            copy_all_fields: Copy every field of this message into the response

        Returns:
            New Message

        Raises:
            ConfigurationError: MTI is not 4 digits, or its function digit is 9
        """
        mti = self.mti
        if not (isinstance(mti, str) and len(mti) == 4 and mti.isascii() and mti.isdigit()):
            raise ConfigurationError(f"Cannot create a response to MTI {mti!r}")
        if mti[2] == "9":
            raise ConfigurationError(f"MTI {mti} has no response type")
        response = Message(mti=f"{int(mti, 16) + 0x10:04X}")
        if copy_all_fields:
            response.copy_fields_from(self, *self.fields)
        return response

    def field_numbers(self) -> list[int]:
        """Populated field numbers in ascending order."""
        return sorted(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, number: object) -> bool:
        return number in self.fields

    def __iter__(self) -> Iterator[tuple[int, FieldValue]]:
        """Iterate (number, value) pairs in ascending field order."""
        for n in self.field_numbers():
            yield n, self.fields[n]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "mti": self.mti,
            "fields": {str(n): value.to_dict() for n, value in self},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        """Create a Message from a dictionary.

        Args:
            data: {"mti": "0200", "fields": {"3": {"type": "NUMERIC", ...}}}

        Returns:
            Message instance

        Raises:
            ConfigurationError: Missing "mti", or "fields" is not an object
            FieldRangeError: A field key is not a number
        """
        if not isinstance(data, dict) or "mti" not in data:
            raise ConfigurationError("Message must be an object with an 'mti'")
        fields = data.get("fields", {})
        if not isinstance(fields, dict):
            raise ConfigurationError("Message 'fields' must map field numbers to values")

        message = cls(mti=str(data["mti"]))
        for key, value in fields.items():
            try:
                number = int(key)
            except ValueError:
                raise FieldRangeError(f"Invalid field number: {key!r}") from None
            message.set_field(number, FieldValue.from_dict(value, number))
        return message
