import contextlib
import logging
import time
from typing import Any, Dict, Iterator


def _kv(ctx: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in ctx.items() if v is not None)


@contextlib.contextmanager
def log_timing(logger: logging.Logger, op: str, **ctx: Any) -> Iterator[Dict[str, Any]]:
    """Log ``op`` with its duration; callers may add fields to the yielded dict."""
    t0 = time.perf_counter()
    extra: Dict[str, Any] = {}
    outcome = "ok"
    try:
        yield extra
    except BaseException as e:
        outcome = type(e).__name__
        raise
    finally:
        dt_ms = int((time.perf_counter() - t0) * 1000)
        msg_ctx = {**ctx, **extra, "op": op, "outcome": outcome, "duration_ms": dt_ms}
        logger.log(logging.INFO if outcome == "ok" else logging.WARNING, _kv(msg_ctx))
