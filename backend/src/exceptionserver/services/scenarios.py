"""Scenario recipes and the scenario table.

Each recipe builds one error shape out of ``wrap`` calls. The table maps a
path to a recipe (or a literal success value) and a status code. It is built
once at startup and handed to the router; nothing registers itself globally.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Protocol

from exceptionserver.exceptions import PanicError
from exceptionserver.services.error_chain import (
    ErrorChain,
    RootCause,
    format_trace,
    render,
    wrap,
)

ROOT_CAUSE_MESSAGE = "errors.New error message"
OK_VALUE = "hello, world!"
PANIC_MESSAGE = "panicking in the server"


def native_error(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> RootCause:
    return root_cause


def simple_error(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> ErrorChain:
    return wrap(native_error(root_cause), "simpleError error message")


def nested_error(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> ErrorChain:
    return wrap(simple_error(root_cause), "outerError error message")


def no_message_error(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> ErrorChain:
    return wrap(native_error(root_cause), "")


def nested_no_message_error(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> ErrorChain:
    return wrap(no_message_error(root_cause), "")


class ErrorSource(Protocol):
    """Anything that can hand back an error from a method call."""

    def interface_error(self) -> ErrorChain | RootCause: ...


@dataclass(frozen=True)
class NamedErrorSource:
    name: str
    root_cause: RootCause = ROOT_CAUSE_MESSAGE

    def interface_error(self) -> ErrorChain:
        return wrap(native_error(self.root_cause), "interface method error")


def interface_function_error(source: ErrorSource) -> ErrorChain:
    """Wrap, without a message, an error that ``source`` already wrapped."""
    return wrap(source.interface_error(), "")


class Outcome(Protocol):
    """What a scenario resolves to: a payload to encode and fields to log."""

    @property
    def payload(self) -> Any: ...

    def log_fields(self) -> dict[str, str]: ...


@dataclass(frozen=True)
class Success:
    """A literal value to return as-is."""

    payload: Any

    def log_fields(self) -> dict[str, str]:
        return {}


@dataclass(frozen=True)
class Failure:
    """A rendered error chain. ``trace`` is for logs and never reaches the client."""

    payload: str
    trace: str

    @classmethod
    def from_error(cls, err: ErrorChain | RootCause) -> "Failure":
        return cls(payload=render(err), trace=format_trace(err))

    def log_fields(self) -> dict[str, str]:
        return {"trace": self.trace}


@dataclass(frozen=True)
class Scenario:
    path: str
    status_code: int
    resolve: Callable[[], Outcome]


ScenarioTable = Mapping[str, Scenario]


def _panic() -> Outcome:
    raise PanicError(PANIC_MESSAGE)


def build_scenario_table(root_cause: RootCause = ROOT_CAUSE_MESSAGE) -> ScenarioTable:
    """Build the read-only path -> scenario table.

    ``root_cause`` is the innermost text of every error scenario.
    """
    scenarios = [
        Scenario("/ok", 200, lambda: Success(OK_VALUE)),
        Scenario(
            "/simpleStackTraceError",
            500,
            lambda: Failure.from_error(simple_error(root_cause)),
        ),
        Scenario(
            "/nestedStackTraceError",
            500,
            lambda: Failure.from_error(nested_error(root_cause)),
        ),
        Scenario(
            "/nestedNoMessageStackTraceError",
            500,
            lambda: Failure.from_error(nested_no_message_error(root_cause)),
        ),
        Scenario(
            "/interfaceFunctionStackTraceError",
            500,
            lambda: Failure.from_error(
                interface_function_error(NamedErrorSource("foo", root_cause))
            ),
        ),
        Scenario("/nativeError", 500, lambda: Failure.from_error(native_error(root_cause))),
        Scenario("/panic", 500, _panic),
    ]
    return MappingProxyType({scenario.path: scenario for scenario in scenarios})
