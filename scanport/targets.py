from __future__ import annotations

import re
from typing import Iterable, List

from .errors import InvalidSubnet
from .models import Target

# Only 24-bit IPv4 subnets are supported, "x.x.x.0/24".
_SUBNET = re.compile(r"(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})/24")

FIRST_HOST = 1
LAST_HOST = 254


def parse_subnet(spec: str) -> str:
    """
    Returns the network prefix of a /24 subnet, e.g. "10.60.3." for
    "10.60.3.0/24". The host octet is only checked for range and is
    otherwise ignored.
    """
    m = _SUBNET.fullmatch(spec)
    if not m:
        raise InvalidSubnet(f"Invalid subnet '{spec}'")
    octets = [int(g) for g in m.groups()]
    if any(o > 255 for o in octets):
        raise InvalidSubnet(f"Invalid subnet '{spec}'")
    return "{}.{}.{}.".format(*octets[:3])


def expand_targets(subnets: Iterable[str], port: int) -> List[Target]:
    """
    Expands each subnet into hosts .1 through .254, subnets in the order
    given. Every subnet is validated before any target is produced.
    """
    prefixes = [parse_subnet(s) for s in subnets]
    return [
        Target(address=f"{prefix}{host}", port=port)
        for prefix in prefixes
        for host in range(FIRST_HOST, LAST_HOST + 1)
    ]
