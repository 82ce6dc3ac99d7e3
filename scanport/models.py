from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Target:
    address: str
    port: int


class ProbeOutcome(Enum):
    OPEN = "open"
    CLOSED = "closed"
    TIMED_OUT = "timeout"
    HOST_DOWN = "host-down"
    ERROR = "error"


@dataclass(frozen=True)
class ProbeResult:
    target: Target
    outcome: ProbeOutcome
    detail: str
    elapsed_s: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.outcome is ProbeOutcome.OPEN
