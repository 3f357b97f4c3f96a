"""isocodec - ISO 8583 message encoder and decoder."""

from .codec import (
    IsoCodecError, ConfigurationError, CapacityOverflowError, FieldRangeError,
    UnknownTypeError, MalformedInputError, MissingSpecificationError,
    IsoType, FieldSpec, SpecTable, ParseConfig, encode_message, decode_message,
)
from .models import FieldValue, Message

__version__ = "0.1.0"

__all__ = [
    "IsoCodecError", "ConfigurationError", "CapacityOverflowError", "FieldRangeError",
    "UnknownTypeError", "MalformedInputError", "MissingSpecificationError",
    "IsoType", "FieldSpec", "SpecTable", "ParseConfig", "encode_message", "decode_message",
    "FieldValue", "Message",
]
