"""ISO 8583 message encoder.

Output layout:

    [MTI: 4][primary bitmap: 16 hex][secondary bitmap: 16 hex, optional][fields]

Fields are written in ascending field-number order with no delimiters. The
decoder relies on that order to tell fields apart.
"""

from ..models.message import Message
from .bitmap import MAX_FIELD, bitmap_to_hex, build_bitmap
from .errors import ConfigurationError, FieldRangeError

MTI_LENGTH = 4

# One byte per character, so every byte value round-trips
WIRE_ENCODING = "latin-1"


def check_field_numbers(numbers) -> None:
    """Reject field numbers outside 2-128.

    Field 1 is the secondary-bitmap flag and can never carry data.
    """
    for n in numbers:
        if not isinstance(n, int) or isinstance(n, bool) or not 2 <= n <= MAX_FIELD:
            raise FieldRangeError(f"Field {n} not supported (must be 2-{MAX_FIELD})", field=n)


def check_wire_text(text: str, field: int | None = None) -> str:
    """Return ``text`` if every character fits in one wire byte.

    Raises:
        ConfigurationError: A character is outside latin-1
    """
    try:
        text.encode(WIRE_ENCODING)
    except UnicodeEncodeError as e:
        where = f"Field {field}" if field is not None else "MTI"
        raise ConfigurationError(
            f"{where} has a character that cannot be sent: {text[e.start]!r}", field=field
        ) from e
    return text


def encode_text(message: Message, force_secondary_bitmap: bool = False) -> str:
    """Encode a message to wire text.

    Args:
        message: Message to encode
        force_secondary_bitmap: Always include the secondary bitmap

    Returns:
        Wire text (MTI, bitmap hex and fields)

    Raises:
        ConfigurationError: MTI is not 4 characters, a fixed field has no length,
            or text has characters outside latin-1
        FieldRangeError: A field number is outside 2-128
        CapacityOverflowError: A variable field is too long for its prefix
        UnknownTypeError: A field has an unrecognised type
    """
    mti = message.mti
    if not isinstance(mti, str) or len(mti) != MTI_LENGTH:
        raise ConfigurationError(f"MTI must be {MTI_LENGTH} characters, got {mti!r}")

    numbers = list(message.fields)
    check_field_numbers(numbers)

    parts = [check_wire_text(mti), bitmap_to_hex(build_bitmap(numbers, force_secondary_bitmap))]
    for n in sorted(numbers):
        parts.append(check_wire_text(message.fields[n].encode(field=n), n))
    return "".join(parts)


def encode_message(message: Message, force_secondary_bitmap: bool = False) -> bytes:
    """Encode a message to wire bytes.

    See ``encode_text`` for arguments and errors.
    """
    return encode_text(message, force_secondary_bitmap).encode(WIRE_ENCODING)
