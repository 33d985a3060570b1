"""Fixed-size DCB numeric arrays with optional percent-sum validation."""

from __future__ import annotations

from nmprops.core.errors import InvalidSyntaxError, OutOfRangeError, SumInvariantViolationError
from nmprops.parsers.tokens import parse_int

DCB_ARRAY_LEN = 8


def parse_uint_array(text: str, *, maximum: int, other: int = 0) -> tuple[int, ...]:
    """Parse exactly eight comma-separated numbers in `0..maximum`, or exactly `other` when set."""
    items = text.split(",")
    if len(items) != DCB_ARRAY_LEN:
        raise InvalidSyntaxError(f"must contain {DCB_ARRAY_LEN} comma-separated numbers")

    numbers: list[int] = []
    for item in items:
        item = item.strip()
        number = parse_int(item, minimum=0, maximum=other or maximum)
        if number is None or (other and number > maximum and number != other):
            if other:
                raise OutOfRangeError(
                    f"'{item}' not a number between 0 and {maximum} (inclusive) or {other}"
                )
            raise OutOfRangeError(f"'{item}' not a number between 0 and {maximum} (inclusive)")
        numbers.append(number)
    return tuple(numbers)


def parse_dcb_array(text: str, *, maximum: int, other: int = 0, percent: bool = False) -> tuple[int, ...]:
    numbers = parse_uint_array(text, maximum=maximum, other=other)
    if percent and sum(numbers) != 100:
        raise SumInvariantViolationError("bandwidth percentages must total 100%")
    return numbers


def render_dcb_array(numbers: tuple[int, ...]) -> str:
    return ",".join(str(number) for number in numbers)
