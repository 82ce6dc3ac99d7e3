from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_HALF_EVEN, Decimal

from .errors import InvalidTimeout

# poll() takes its timeout as a C int of milliseconds.
MAX_TIMEOUT_MS = 2**31 - 1
MAX_TIMEOUT_SECONDS = MAX_TIMEOUT_MS // 1000

_NUMBER = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_MICRO = Decimal("0.000001")


@dataclass(frozen=True)
class Timeout:
    seconds: int
    microseconds: int

    def total_seconds(self) -> float:
        return self.seconds + self.microseconds / 1_000_000

    def milliseconds(self) -> int:
        # Round up so a wait never ends before the full duration.
        return self.seconds * 1000 + (self.microseconds + 999) // 1000


def parse_timeout(spec: str) -> Timeout:
    """
    Converts a decimal seconds string such as "0.5" into a Timeout,
    exact to the microsecond.
    """
    if not _NUMBER.fullmatch(spec):
        raise InvalidTimeout(f"Invalid floating point number '{spec}'")

    try:
        value = Decimal(spec)
        # Compare before quantizing, huge exponents would overflow the context.
        too_big = value.to_integral_value(rounding=ROUND_CEILING) > MAX_TIMEOUT_SECONDS + 1
    except ArithmeticError as e:
        raise InvalidTimeout(f"Invalid floating point number '{spec}'") from e
    if too_big:
        raise InvalidTimeout(f"Invalid floating point number '{spec}'")

    value = value.quantize(_MICRO, rounding=ROUND_HALF_EVEN)
    seconds = int(value)
    timeout = Timeout(seconds=seconds, microseconds=int((value - seconds) * 1_000_000))
    if timeout.milliseconds() > MAX_TIMEOUT_MS:
        raise InvalidTimeout(f"Invalid floating point number '{spec}'")
    return timeout
