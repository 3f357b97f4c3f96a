"""Exceptions raised by the ISO 8583 codec.

All errors derive from ``IsoCodecError``, which is itself a ``ValueError`` so
callers that only care about "bad input" can catch that.
"""


class IsoCodecError(ValueError):
    """Base class for codec failures.

    Attributes:
        field: Field number the failure relates to, if known
    """

    def __init__(self, message: str, field: int | None = None):
        super().__init__(message)
        self.field = field


class ConfigurationError(IsoCodecError):
    """A fixed-width type was used without a positive declared length,
    or a parse configuration is inconsistent."""


class CapacityOverflowError(IsoCodecError):
    """Content is longer than its length prefix can express."""


class FieldRangeError(IsoCodecError):
    """Field number outside 2-128."""


class UnknownTypeError(IsoCodecError):
    """A field type tag that is not one of the known ISO types."""


class MalformedInputError(IsoCodecError):
    """Wire data is truncated or cannot be parsed."""


class MissingSpecificationError(IsoCodecError):
    """The bitmap flags a field the specification table does not describe."""
