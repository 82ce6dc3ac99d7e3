from __future__ import annotations

import csv
import json
import sys
from typing import List, Optional, TextIO

from .models import ProbeResult

FORMATS = ("txt", "csv", "json")


def format_row(r: ProbeResult, include_all: bool = False) -> str:
    if not include_all:
        return r.target.address
    return f"{r.target.address} {r.outcome.value}"


def print_results(
    results: List[ProbeResult],
    fmt: str = "txt",
    include_all: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Writes results in enumeration order. Only open targets are written
    unless include_all is set.
    """
    out = stream if stream is not None else sys.stdout
    filtered = [r for r in results if (include_all or r.is_open)]

    if fmt == "txt":
        for r in filtered:
            out.write(format_row(r, include_all) + "\n")

    elif fmt == "csv":
        w = csv.writer(out, lineterminator="\n")
        w.writerow(["address", "port", "outcome", "elapsed_s"])
        for r in filtered:
            w.writerow([r.target.address, r.target.port, r.outcome.value, r.elapsed_s])

    elif fmt == "json":
        payload = [
            {
                "address": r.target.address,
                "port": r.target.port,
                "outcome": r.outcome.value,
                "elapsed_s": r.elapsed_s,
            }
            for r in filtered
        ]
        json.dump(payload, out, indent=2)
        out.write("\n")

    else:
        raise ValueError(f"Unsupported format: {fmt}")

    out.flush()
