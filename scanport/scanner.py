from __future__ import annotations

import errno
import logging
import os
import select
import socket
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from .errors import ProbeIOError
from .models import ProbeOutcome, ProbeResult, Target
from .timeouts import Timeout

logger = logging.getLogger(__name__)

DEFAULT_BACKOFF_S = 0.01

# "Too many open files", either for this process or system-wide.
_EXHAUSTED = (errno.EMFILE, errno.ENFILE)
_HOST_DOWN = (errno.EHOSTDOWN, errno.EHOSTUNREACH)
# EAGAIN from connect means no local port was free, not a pending connection.
_IN_PROGRESS = (errno.EINPROGRESS,)


def _acquire_socket(backoff_s: float) -> socket.socket:
    while True:
        try:
            return socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as e:
            if e.errno not in _EXHAUSTED:
                raise ProbeIOError(f"socket: {e.strerror or e}") from e
        time.sleep(backoff_s)


def _wait_writable(sock: socket.socket, timeout: Timeout) -> bool:
    """
    Blocks until sock is writable or timeout elapses. Returns False on
    timeout.
    """
    if hasattr(select, "poll"):
        poller = select.poll()
        poller.register(sock, select.POLLOUT)
        return bool(poller.poll(timeout.milliseconds()))

    # select() is limited to FD_SETSIZE descriptors; only used where poll is missing.
    _, writable, _ = select.select([], [sock], [], timeout.total_seconds())
    return bool(writable)


def probe(target: Target, timeout: Timeout, backoff_s: float = DEFAULT_BACKOFF_S) -> ProbeResult:
    """
    Makes one non-blocking connection attempt to target and classifies it.

    Raises ProbeIOError when a socket call fails in a way none of the
    outcomes cover. The socket is always closed before returning.
    """
    start = time.perf_counter()

    def result(outcome: ProbeOutcome, detail: str) -> ProbeResult:
        elapsed = time.perf_counter() - start
        return ProbeResult(target=target, outcome=outcome, detail=detail, elapsed_s=round(elapsed, 4))

    sock = _acquire_socket(backoff_s)
    try:
        try:
            sock.setblocking(False)
            err = sock.connect_ex((target.address, target.port))
        except OSError as e:
            raise ProbeIOError(f"connect {target.address}: {e.strerror or e}") from e

        if err == 0:
            return result(ProbeOutcome.OPEN, "connected immediately")
        if err in _HOST_DOWN:
            return result(ProbeOutcome.HOST_DOWN, "host down")
        if err == errno.ECONNREFUSED:
            return result(ProbeOutcome.CLOSED, "not connected")
        if err not in _IN_PROGRESS:
            raise ProbeIOError(f"connect {target.address}: {os.strerror(err)}")

        try:
            ready = _wait_writable(sock, timeout)
        except (OSError, ValueError, OverflowError) as e:
            raise ProbeIOError(f"poll: {e}") from e
        if not ready:
            return result(ProbeOutcome.TIMED_OUT, "timeout")

        try:
            pending = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        except OSError as e:
            raise ProbeIOError(f"getsockopt: {e.strerror or e}") from e
        if pending != 0:
            return result(ProbeOutcome.CLOSED, "not connected")
        return result(ProbeOutcome.OPEN, "connected")
    finally:
        sock.close()


def _log_result(r: ProbeResult) -> None:
    if r.outcome is ProbeOutcome.ERROR:
        logger.warning("%s - %s", r.target.address, r.detail)
    elif r.outcome is ProbeOutcome.OPEN and r.detail == "connected":
        logger.debug("%s - connected (%.4fs)", r.target.address, r.elapsed_s)
    else:
        logger.debug("%s - %s", r.target.address, r.detail)


def _cancel(futures) -> None:
    # Probes already running finish on their own timeout.
    for fut in futures:
        fut.cancel()


def _probe_isolated(target: Target, timeout: Timeout, backoff_s: float, fail_fast: bool) -> ProbeResult:
    try:
        return probe(target, timeout, backoff_s)
    except ProbeIOError as e:
        if fail_fast:
            raise
        return ProbeResult(target=target, outcome=ProbeOutcome.ERROR, detail=str(e))
    except Exception as e:
        if fail_fast:
            raise ProbeIOError(f"probe {target.address}: {e!r}") from e
        return ProbeResult(target=target, outcome=ProbeOutcome.ERROR, detail=f"unexpected error: {e!r}")


def scan(
    targets: List[Target],
    timeout: Timeout,
    *,
    max_workers: Optional[int] = None,
    backoff_s: float = DEFAULT_BACKOFF_S,
    fail_fast: bool = False,
) -> List[ProbeResult]:
    """
    Probes every target concurrently and waits for all of them.

    By default one worker is started per target. A probe that hits an I/O
    error yields an ERROR result; with fail_fast the first such error
    cancels the remaining probes and is raised instead.

    Results come back in the same order as targets. Each outcome is logged
    as its probe finishes, in completion order. Raises ProbeIOError if a
    worker thread cannot be started.
    """
    if not targets:
        return []

    workers = max_workers if max_workers else len(targets)
    results: Dict[int, ProbeResult] = {}
    start_all = time.perf_counter()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures: Dict[Future, int] = {}
        try:
            for i, t in enumerate(targets):
                futures[pool.submit(_probe_isolated, t, timeout, backoff_s, fail_fast)] = i
        except RuntimeError as e:
            # "can't start new thread": the OS refused another worker.
            _cancel(futures)
            raise ProbeIOError(f"cannot start probe thread: {e}; lower max_workers") from e

        try:
            for fut in as_completed(futures):
                r = fut.result()
                results[futures[fut]] = r
                _log_result(r)
        except ProbeIOError:
            _cancel(futures)
            raise

    ordered = [results[i] for i in range(len(targets))]
    logger.debug(
        "scanned %d targets with %d workers, %d open in %.2fs",
        len(ordered),
        workers,
        sum(1 for r in ordered if r.is_open),
        time.perf_counter() - start_all,
    )
    return ordered
