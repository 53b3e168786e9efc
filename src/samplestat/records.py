"""The sample record and its assembly from split fields."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .config import INT32_MAX, NamePolicy, OverflowPolicy
from .errors import DecodeError, FieldDecodeError, MissingFieldError
from .parsers.csv_line import CsvLineParser, FieldSlice
from .parsers.decoders import decode_integer, decode_name


@dataclass(frozen=True)
class Person:
    name: str
    age: int
    height: int
    name_truncated: bool = field(default=False, compare=False, repr=False)

    @classmethod
    def from_fields(
        cls,
        parser: CsvLineParser,
        name_capacity: int = 50,
        name_policy: NamePolicy = "truncate",
        integer_max: int = INT32_MAX,
        overflow: OverflowPolicy = "fail",
    ) -> "Person":
        """Pull name, age and height off ``parser`` in that order.

        Fields past the third are ignored.

        Raises:
            ParsingError: a field is missing or does not decode.
        """
        value = parser.get_value()
        if value is None:
            raise MissingFieldError("name")
        name, truncated = decode_name(value, name_capacity, name_policy)

        age = _integer_field(parser, "age", integer_max, overflow)
        height = _integer_field(parser, "height", integer_max, overflow)
        return cls(name=name, age=age, height=height, name_truncated=truncated)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "age": self.age, "height": self.height}

    def __str__(self) -> str:
        return f"name: {self.name}, age: {self.age}, height: {self.height}"


def _integer_field(
    parser: CsvLineParser, name: str, maximum: int, overflow: OverflowPolicy
) -> int:
    value: FieldSlice | None = parser.get_value()
    if value is None:
        raise MissingFieldError(name)
    try:
        return decode_integer(value, maximum, overflow)
    except DecodeError as exc:
        raise FieldDecodeError(name, value.text, exc) from exc
