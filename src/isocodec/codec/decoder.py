"""ISO 8583 message decoder.

Fields have no delimiters or tags on the wire: a field's identity comes
from its bitmap bit, and its boundaries from the type and length in the
specification table. A wrong entry misaligns every field after it.
"""

from typing import Mapping

from ..models.field import FieldValue
from ..models.message import Message
from .bitmap import BITMAP_HEX_CHARS, bitmap_from_hex, has_secondary, iter_fields
from .encoder import MTI_LENGTH, WIRE_ENCODING
from .errors import MalformedInputError, MissingSpecificationError
from .iso_types import decode_value
from .spec_table import FieldSpec

MIN_LENGTH = MTI_LENGTH + BITMAP_HEX_CHARS
MIN_LENGTH_SECONDARY = MIN_LENGTH + BITMAP_HEX_CHARS


class IsoReader:
    """Cursor over ISO 8583 wire data."""

    def __init__(self, data: bytes | bytearray | memoryview | str):
        """Initialize reader with wire data.

        Args:
            data: Wire bytes, or text with one character per byte
        """
        if isinstance(data, str):
            try:
                data = data.encode(WIRE_ENCODING)
            except UnicodeEncodeError as e:
                raise MalformedInputError(f"Wire text is not single-byte: {e}") from e
        self.data = bytes(data)
        self.pos = 0

    @property
    def remaining(self) -> int:
        """Number of bytes remaining to read."""
        return len(self.data) - self.pos

    def read_text(self, count: int, what: str = "data") -> str:
        """Read ``count`` bytes as text."""
        if count > self.remaining:
            raise MalformedInputError(
                f"Insufficient data for {what}: need {count} bytes, {self.remaining} remaining"
            )
        result = self.data[self.pos : self.pos + count].decode(WIRE_ENCODING)
        self.pos += count
        return result

    def read_length_prefix(self, digits: int, what: str = "data") -> int:
        """Read a decimal length prefix of ``digits`` characters."""
        if digits > self.remaining:
            raise MalformedInputError(f"Insufficient data for {what} length prefix")
        text = self.read_text(digits, what)
        if not (text.isascii() and text.isdigit()):
            raise MalformedInputError(f"Invalid length prefix {text!r} for {what}")
        return int(text)

    def read_bitmap(self) -> bytes:
        """Read one 16-character hex bitmap."""
        return bitmap_from_hex(self.read_text(BITMAP_HEX_CHARS, "bitmap"))


def decode_message(
    data: bytes | bytearray | memoryview | str, specs: Mapping[int, FieldSpec]
) -> Message:
    """Decode wire data into a Message.

    Args:
        data: Wire data
        specs: Field number to FieldSpec for every field the sender may include

    Returns:
        Decoded Message

    Raises:
        MalformedInputError: Truncated data, bad bitmap hex or bad length prefix
        MissingSpecificationError: A flagged field has no entry in ``specs``
    """
    reader = IsoReader(data)
    if reader.remaining < MIN_LENGTH:
        raise MalformedInputError(
            f"Data too short: {reader.remaining} bytes, need at least {MIN_LENGTH}"
        )

    mti = reader.read_text(MTI_LENGTH, "MTI")
    bitmap = reader.read_bitmap()

    if has_secondary(bitmap):
        if len(reader.data) < MIN_LENGTH_SECONDARY:
            raise MalformedInputError("Data too short for secondary bitmap")
        bitmap += reader.read_bitmap()

    message = Message(mti=mti)
    for number in iter_fields(bitmap):
        spec = specs.get(number)
        if spec is None:
            raise MissingSpecificationError(f"No specification for field {number}", field=number)
        value = decode_value(spec.iso_type, reader, spec.length, field=number)
        length = spec.length if spec.iso_type.needs_length else None
        message.fields[number] = FieldValue(spec.iso_type, value, length)

    return message
