from __future__ import annotations

import hashlib
import json
import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

log = logging.getLogger("feedprobe.sensors")


def _shape(obj: Any) -> tuple[str, int | None]:
    """Return (type name, len) for *obj* if possible."""
    t = type(obj).__name__
    try:
        length = len(obj)  # type: ignore[arg-type]
    except TypeError:
        length = None
    return t, length


def sensor(tag: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Log duration, outcome and input/output shape of every call."""

    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            t0 = time.perf_counter()
            ok = True
            result = None
            try:
                result = fn(*args, **kwargs)
                return result
            except Exception:
                ok = False
                raise
            finally:
                out_t, out_len = _shape(result)
                payload = {
                    "tag": tag,
                    "fn": fn.__qualname__,
                    "ok": ok,
                    "dt_ms": round((time.perf_counter() - t0) * 1000, 2),
                    "input": [list(_shape(a)) for a in (*args, *kwargs.values())],
                    "output": [out_t, out_len],
                    "args_sha": hashlib.md5(repr((args, kwargs)).encode()).hexdigest()[:8],
                }
                log.info("SENSOR: %s", json.dumps(payload))

        return wrapper

    return decorate
