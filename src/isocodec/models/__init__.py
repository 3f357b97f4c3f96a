"""Data models for isocodec."""

from .field import FieldValue
from .message import Message

__all__ = ["FieldValue", "Message"]
