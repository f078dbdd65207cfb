"""Error-chain construction and rendering.

A chain is a linked list of immutable frames, outermost first. Each frame
carries an optional message and a cause: either the next-inner frame or the
root cause, which is always a plain string.

Rendering joins every non-empty message with ": " and ends with the root
cause, so a chain with no messages anywhere renders as the bare root cause::

    render(wrap("boom", "loading config"))  # "loading config: boom"
    render(wrap(wrap("boom", ""), ""))      # "boom"
"""

import inspect
import os
from collections.abc import Iterator
from dataclasses import dataclass

RootCause = str

MESSAGE_DELIMITER = ": "


@dataclass(frozen=True, slots=True)
class CallSite:
    """Where a frame was created. Only used for traces, never for rendering."""

    function: str
    filename: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.lineno} ({self.function})"


@dataclass(frozen=True, slots=True)
class ErrorChain:
    """One wrap of an inner error, optionally adding a message."""

    message: str
    cause: "ErrorChain | RootCause"
    location: CallSite | None = None

    def __str__(self) -> str:
        return render(self)


def wrap(inner: ErrorChain | RootCause, message: str | None = "") -> ErrorChain:
    """Return a new frame around ``inner``.

    ``inner`` is referenced, never copied or modified, so it can be reused or
    inspected after wrapping. ``None`` is treated as the empty message.
    """
    current = inspect.currentframe()
    caller = current.f_back if current is not None else None
    location = None
    if caller is not None:
        location = CallSite(
            function=caller.f_code.co_name,
            filename=os.path.basename(caller.f_code.co_filename),
            lineno=caller.f_lineno,
        )
    return ErrorChain(message=message or "", cause=inner, location=location)


def frames(err: ErrorChain | RootCause) -> Iterator[ErrorChain]:
    """Yield the frames of ``err`` from outermost to innermost."""
    current = err
    while isinstance(current, ErrorChain):
        yield current
        current = current.cause


def root_cause(err: ErrorChain | RootCause) -> RootCause:
    """Return the innermost, unwrapped description."""
    current = err
    while isinstance(current, ErrorChain):
        current = current.cause
    return current


def render(err: ErrorChain | RootCause) -> str:
    """Render ``err`` as a single display string, outer to inner.

    Frames with an empty message contribute nothing. Whitespace-only messages
    count as messages.
    """
    messages = [frame.message for frame in frames(err) if frame.message]
    messages.append(root_cause(err))
    return MESSAGE_DELIMITER.join(messages)


def format_trace(err: ErrorChain | RootCause) -> str:
    """Render ``err`` with the call site of every frame, for logs.

    Output looks like::

        outer message
         --- at scenarios.py:40 (nested_error) ---
        Caused by: inner message
         --- at scenarios.py:35 (simple_error) ---
        Caused by: root cause
    """
    lines: list[str] = []
    for frame in frames(err):
        if frame.message:
            lines.append(f"Caused by: {frame.message}" if lines else frame.message)
        if frame.location is not None:
            lines.append(f" --- at {frame.location} ---")
    cause = root_cause(err)
    lines.append(f"Caused by: {cause}" if lines else cause)
    return "\n".join(lines)
