"""Field decoders: turn a ``FieldSlice`` into a typed value or raise."""
from __future__ import annotations

import logging
from typing import NamedTuple

from ..config import INT32_MAX, NamePolicy, OverflowPolicy
from ..errors import (
    EmptyFieldError,
    IntegerOverflowError,
    InvalidDigitError,
    NameTooLongError,
)
from .csv_line import FieldSlice

logger = logging.getLogger(__name__)

_DIGIT_BASE = 10


class DecodedName(NamedTuple):
    value: str
    truncated: bool


def is_digit(ch: str) -> bool:
    """ASCII decimal digit only; ``str.isdigit`` also accepts e.g. '²'."""
    return "0" <= ch <= "9"


def decode_name(
    field: FieldSlice,
    capacity: int = 50,
    policy: NamePolicy = "truncate",
) -> DecodedName:
    """Copy a field into bounded name storage of ``capacity - 1`` characters.

    Over-long names are either shortened (``truncated=True``, logged) or
    rejected with ``NameTooLongError``, depending on ``policy``.
    """
    limit = capacity - 1
    if limit < 1:
        raise ValueError("name capacity must be at least 2")
    if len(field) <= limit:
        return DecodedName(field.text, False)
    if policy == "reject":
        raise NameTooLongError(len(field), capacity)
    value = field.line[field.offset:field.offset + limit]
    logger.warning("name truncated from %d to %d characters: %r", len(field), limit, value)
    return DecodedName(value, True)


def decode_integer(
    field: FieldSlice,
    maximum: int = INT32_MAX,
    overflow: OverflowPolicy = "fail",
) -> int:
    """Parse an unsigned base-10 integer, left to right.

    Raises:
        EmptyFieldError: the field has zero length.
        InvalidDigitError: a character is not an ASCII digit.
        IntegerOverflowError: the value exceeds ``maximum`` under the
            ``"fail"`` policy. Under ``"saturate"`` the result is clamped.
    """
    if len(field) == 0:
        raise EmptyFieldError()
    for i, ch in enumerate(field):
        if not is_digit(ch):
            raise InvalidDigitError(field.text, i)
    num = 0
    for ch in field:
        num = num * _DIGIT_BASE + (ord(ch) - ord("0"))
        if num > maximum:
            if overflow == "fail":
                raise IntegerOverflowError(field.text, maximum)
            return maximum
    return num
