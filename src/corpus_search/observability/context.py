"""Run context propagated into log records for correlation."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


# Per-invocation context (run id + operation label)
run_context: ContextVar[dict | None] = ContextVar("run_context", default=None)


def generate_run_id() -> str:
    """Generate a 32-char hex run ID."""
    return uuid4().hex


def get_run_context() -> dict:
    """Get the current run context, creating a run id on first use."""
    ctx = run_context.get()
    if ctx is None or not ctx.get("run_id"):
        ctx = {"run_id": generate_run_id()}
        run_context.set(ctx)
    return ctx


def set_run_context(run_id: str, **extra: object) -> None:
    run_context.set({"run_id": run_id, **extra})


@contextmanager
def operation(name: str, **extra: object) -> Iterator[dict]:
    """Tag log records emitted inside the block with an operation name."""

    previous = get_run_context()
    token = run_context.set({**previous, "operation": name, **extra})
    try:
        yield run_context.get() or {}
    finally:
        run_context.reset(token)
