"""Run one pair inside a child process so warm runtime state does not leak between pairs."""

import logging
import multiprocessing as mp
from typing import Any, Callable, Sequence

from bench.errors import IsolationError

logger = logging.getLogger(__name__)

REAP_TIMEOUT_S = 5.0


def _context():
    # fork keeps registered callables (closures, lambdas) usable without pickling
    if "fork" in mp.get_all_start_methods():
        return mp.get_context("fork")
    return mp.get_context("spawn")


def _child_main(conn, target: Callable[..., Any], args: Sequence[Any]) -> None:
    try:
        payload = ("ok", target(*args))
    except BaseException as e:
        payload = ("error", f"{type(e).__name__}: {e}")
    try:
        conn.send(payload)
    finally:
        conn.close()


def _reap(proc) -> None:
    proc.join(REAP_TIMEOUT_S)
    if proc.is_alive():
        logger.warning("killing unresponsive child pid=%s", proc.pid)
        proc.kill()
        proc.join()


def run_isolated(target: Callable[..., Any], args: Sequence[Any] = (), timeout_s: float = 60.0) -> Any:
    """Run target(*args) in a fresh child and return its result.

    The parent blocks until the child reports or `timeout_s` passes; the child
    is always joined (or killed) before returning. Raises IsolationError when
    the child cannot start, dies without a result, raises, or times out.
    """
    ctx = _context()
    recv_conn, send_conn = ctx.Pipe(duplex=False)
    proc = ctx.Process(target=_child_main, args=(send_conn, target, tuple(args)), daemon=True)
    try:
        proc.start()
    except Exception as e:
        recv_conn.close()
        send_conn.close()
        raise IsolationError(f"child process failed to start: {type(e).__name__}: {e}") from e
    send_conn.close()
    try:
        if not recv_conn.poll(timeout_s):
            logger.warning("child pid=%s exceeded %.1fs, killing", proc.pid, timeout_s)
            proc.kill()
            raise IsolationError(f"child process timed out after {timeout_s:.1f}s")
        try:
            status, value = recv_conn.recv()
        except EOFError:
            proc.join(REAP_TIMEOUT_S)
            raise IsolationError(f"child process exited without a result (exit code {proc.exitcode})") from None
    finally:
        recv_conn.close()
        _reap(proc)
    if status != "ok":
        raise IsolationError(f"child process failed: {value}")
    return value
