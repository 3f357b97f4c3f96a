"""ISO 8583 wire codec."""

from .errors import (
    IsoCodecError, ConfigurationError, CapacityOverflowError, FieldRangeError,
    UnknownTypeError, MalformedInputError, MissingSpecificationError,
)
from .iso_types import IsoType, encode_value, decode_value, format_date, format_amount
from .bitmap import build_bitmap, bitmap_to_hex, bitmap_from_hex, iter_fields, has_secondary
from .spec_table import FieldSpec, SpecTable, ParseConfig
from .encoder import encode_message, encode_text
from .decoder import IsoReader, decode_message

__all__ = [
    "IsoCodecError", "ConfigurationError", "CapacityOverflowError", "FieldRangeError",
    "UnknownTypeError", "MalformedInputError", "MissingSpecificationError",
    "IsoType", "encode_value", "decode_value", "format_date", "format_amount",
    "build_bitmap", "bitmap_to_hex", "bitmap_from_hex", "iter_fields", "has_secondary",
    "FieldSpec", "SpecTable", "ParseConfig",
    "encode_message", "encode_text", "IsoReader", "decode_message",
]
