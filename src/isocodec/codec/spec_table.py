"""Field specification tables for decoding ISO 8583 messages.

Decoding needs to know, for every field the bitmap flags, the type (and for
NUMERIC, ALPHA and BINARY the length) the sender used. Any mapping of field
number to ``FieldSpec`` works; ``ParseConfig`` loads one table per message
type from JSON.

Example config file (parse.json):
{
    "messages": {
        "0200": {
            "fields": {
                "3": {"type": "NUMERIC", "length": 6},
                "4": {"type": "AMOUNT"},
                "7": {"type": "DATE10"},
                "41": {"type": "ALPHA", "length": 8},
                "48": {"type": "LLLVAR"}
            }
        },
        "0210": {
            "extends": "0200",
            "fields": {
                "39": {"type": "ALPHA", "length": 2},
                "48": "exclude"
            }
        }
    },
    "default": "0200"
}

A table can inherit from another with "extends"; mapping a field to
"exclude" drops the inherited entry.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping

from .bitmap import MAX_FIELD
from .errors import ConfigurationError, FieldRangeError
from .iso_types import IsoType, parse_length

EXCLUDE = "exclude"


@dataclass(frozen=True)
class FieldSpec:
    """How to read one field: its type and, where needed, its length."""

    iso_type: IsoType
    length: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], number: int | None = None) -> "FieldSpec":
        """Create from {"type": ..., "length": ...}.

        Raises:
            UnknownTypeError: Unknown type tag
            ConfigurationError: NUMERIC, ALPHA or BINARY without a positive length
        """
        if not isinstance(data, dict) or "type" not in data:
            raise ConfigurationError(f"Field {number} needs a 'type'", field=number)
        iso_type = IsoType.from_name(data["type"])
        length = parse_length(data.get("length"), number)
        if iso_type.needs_length and (length is None or length <= 0):
            raise ConfigurationError(
                f"Field {number}: {iso_type.name} requires a positive length", field=number
            )
        return cls(iso_type=iso_type, length=length)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.iso_type.name}
        if self.length is not None:
            result["length"] = self.length
        return result


def _field_number(key: Any) -> int:
    try:
        number = int(key)
    except (TypeError, ValueError):
        raise FieldRangeError(f"Invalid field number: {key!r}") from None
    if not 2 <= number <= MAX_FIELD:
        raise FieldRangeError(f"Field {number} outside 2-{MAX_FIELD}", field=number)
    return number


@dataclass
class SpecTable(Mapping[int, FieldSpec]):
    """Field number to FieldSpec mapping for one message type."""

    specs: dict[int, FieldSpec] = field(default_factory=dict)
    name: str | None = None

    def __getitem__(self, number: int) -> FieldSpec:
        return self.specs[number]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.specs))

    def __len__(self) -> int:
        return len(self.specs)

    def set_spec(self, number: int, spec: FieldSpec) -> "SpecTable":
        self.specs[_field_number(number)] = spec
        return self

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str | None = None) -> "SpecTable":
        """Load from {"3": {"type": "NUMERIC", "length": 6}, ...}.

        Entries set to "exclude" are skipped.
        """
        table = cls(name=name)
        for key, value in data.items():
            number = _field_number(key)
            if value == EXCLUDE:
                continue
            table.specs[number] = FieldSpec.from_dict(value, number)
        return table

    def to_dict(self) -> dict[str, Any]:
        return {str(n): self.specs[n].to_dict() for n in self}


@dataclass
class ParseConfig:
    """Specification tables keyed by message-type indicator."""

    tables: dict[str, SpecTable] = field(default_factory=dict)
    default_mti: str | None = None

    @classmethod
    def from_file(cls, filepath: str | Path) -> "ParseConfig":
        """Load config from JSON file."""
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_json(cls, json_str: str) -> "ParseConfig":
        """Load config from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_dict(cls, data: dict) -> "ParseConfig":
        """Load config from dictionary.

        Tables that extend another are resolved after all tables are read,
        so declaration order does not matter.

        Raises:
            ConfigurationError: Badly shaped config, bad "extends" reference
                or inheritance cycle
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Parse config must be a JSON object")
        config = cls()
        messages = data.get("messages", {})
        if not isinstance(messages, dict):
            raise ConfigurationError("'messages' must map message types to tables")

        resolving: set[str] = set()

        def resolve(mti: str) -> SpecTable:
            if mti in config.tables:
                return config.tables[mti]
            if mti not in messages:
                raise ConfigurationError(f"Parse table extends unknown message type {mti}")
            if mti in resolving:
                raise ConfigurationError(f"Circular 'extends' involving {mti}")
            resolving.add(mti)

            definition = messages[mti]
            if not isinstance(definition, dict):
                raise ConfigurationError(f"Parse table {mti} must be an object")
            table = SpecTable(name=mti)
            parent = definition.get("extends")
            if parent is not None:
                table.specs.update(resolve(str(parent)).specs)

            fields = definition.get("fields", {})
            if not isinstance(fields, dict):
                raise ConfigurationError(f"'fields' of parse table {mti} must be an object")
            for key, value in fields.items():
                number = _field_number(key)
                if value == EXCLUDE:
                    table.specs.pop(number, None)
                else:
                    table.specs[number] = FieldSpec.from_dict(value, number)

            resolving.discard(mti)
            config.tables[mti] = table
            return table

        for mti in messages:
            resolve(str(mti))

        default = data.get("default")
        if default is not None and str(default) not in config.tables:
            raise ConfigurationError(f"Default message type {default} is not defined")
        config.default_mti = str(default) if default is not None else None
        return config

    def add_table(self, mti: str, table: Mapping[int, FieldSpec]) -> None:
        self.tables[mti] = table if isinstance(table, SpecTable) else SpecTable(dict(table), mti)

    def get_specs(self, mti: str | None = None) -> SpecTable | None:
        """Get the table for a message type, the default table, or the only table."""
        if mti and mti in self.tables:
            return self.tables[mti]
        if self.default_mti:
            return self.tables.get(self.default_mti)
        if len(self.tables) == 1:
            return next(iter(self.tables.values()))
        return None
