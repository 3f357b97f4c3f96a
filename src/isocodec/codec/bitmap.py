"""Presence bitmaps for ISO 8583 messages.

The primary bitmap is 8 bytes covering fields 1-64, most significant bit
first, so field 1 is the top bit of byte 0. When any field above 64 is
present a secondary 8-byte bitmap follows, covering fields 65-128, and
bit 1 of the primary bitmap is set to announce it.

On the wire each bitmap is written as 16 uppercase hex characters.
"""

import binascii
from typing import Iterable, Iterator

from .errors import MalformedInputError

PRIMARY_BITMAP_BYTES = 8
BITMAP_HEX_CHARS = PRIMARY_BITMAP_BYTES * 2
MAX_PRIMARY_FIELD = 64
MAX_FIELD = 128
SECONDARY_FLAG = 0x80


def bit_position(field: int) -> tuple[int, int]:
    """Return (byte_index, mask) of a field's bit."""
    index = field - 1
    return index // 8, 1 << (7 - index % 8)


def build_bitmap(fields: Iterable[int], force_secondary: bool = False) -> bytes:
    """Build the bitmap for a set of field numbers.

    Args:
        fields: Populated field numbers (already range-checked)
        force_secondary: Emit a secondary bitmap even if no field exceeds 64

    Returns:
        8 bytes, or 16 bytes when a secondary bitmap is needed
    """
    fields = list(fields)
    secondary = force_secondary or any(f > MAX_PRIMARY_FIELD for f in fields)
    bitmap = bytearray(PRIMARY_BITMAP_BYTES * (2 if secondary else 1))
    for f in fields:
        byte_index, mask = bit_position(f)
        bitmap[byte_index] |= mask
    if secondary:
        bitmap[0] |= SECONDARY_FLAG
    return bytes(bitmap)


def has_secondary(bitmap: bytes) -> bool:
    """Check the continuation bit (field 1) of a primary bitmap."""
    return bool(bitmap) and bool(bitmap[0] & SECONDARY_FLAG)


def is_set(bitmap: bytes, field: int) -> bool:
    """Check whether a field's bit is set."""
    byte_index, mask = bit_position(field)
    if byte_index >= len(bitmap):
        return False
    return bool(bitmap[byte_index] & mask)


def iter_fields(bitmap: bytes) -> Iterator[int]:
    """Yield the flagged field numbers in ascending order, skipping field 1."""
    for f in range(2, len(bitmap) * 8 + 1):
        if is_set(bitmap, f):
            yield f


def bitmap_to_hex(bitmap: bytes) -> str:
    """Render a bitmap as uppercase hex, two characters per byte."""
    return bitmap.hex().upper()


def bitmap_from_hex(text: str) -> bytes:
    """Parse bitmap hex text.

    Raises:
        MalformedInputError: If the text is not valid hex
    """
    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise MalformedInputError(f"Invalid bitmap hex {text!r}") from e
