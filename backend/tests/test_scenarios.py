"""Tests for the scenario recipes and the scenario table."""

import pytest

from exceptionserver.exceptions import PanicError
from exceptionserver.services.error_chain import frames, render
from exceptionserver.services.scenarios import (
    ROOT_CAUSE_MESSAGE,
    Failure,
    NamedErrorSource,
    Success,
    build_scenario_table,
    interface_function_error,
    native_error,
    nested_error,
    nested_no_message_error,
    simple_error,
)


def test_simple_recipe() -> None:
    chain = simple_error()
    assert [frame.message for frame in frames(chain)] == ["simpleError error message"]
    assert render(chain) == "simpleError error message: errors.New error message"


def test_nested_recipe() -> None:
    chain = nested_error()
    assert [frame.message for frame in frames(chain)] == [
        "outerError error message",
        "simpleError error message",
    ]
    assert (
        render(chain)
        == "outerError error message: simpleError error message: errors.New error message"
    )


def test_nested_no_message_recipe_keeps_both_frames() -> None:
    chain = nested_no_message_error()
    assert [frame.message for frame in frames(chain)] == ["", ""]
    assert render(chain) == ROOT_CAUSE_MESSAGE


def test_interface_function_recipe() -> None:
    chain = interface_function_error(NamedErrorSource("foo"))
    inner_frames = list(frames(chain))

    assert [frame.message for frame in inner_frames] == ["", "interface method error"]
    assert inner_frames[0].location is not None
    assert inner_frames[0].location.function == "interface_function_error"
    assert inner_frames[1].location is not None
    assert inner_frames[1].location.function == "interface_error"
    assert render(chain) == "interface method error: errors.New error message"


def test_native_recipe_is_unwrapped() -> None:
    assert native_error() == ROOT_CAUSE_MESSAGE
    assert list(frames(native_error())) == []


@pytest.mark.parametrize("root", [ROOT_CAUSE_MESSAGE, "disk full", ""])
def test_native_and_nested_no_message_render_identically(root: str) -> None:
    assert render(native_error(root)) == render(nested_no_message_error(root)) == root


def test_failure_carries_rendered_chain_and_trace() -> None:
    failure = Failure.from_error(simple_error())
    assert failure.payload == "simpleError error message: errors.New error message"
    assert failure.trace is not None
    assert "(simple_error)" in failure.trace


def test_table_paths_and_status_codes() -> None:
    table = build_scenario_table()
    assert {path: scenario.status_code for path, scenario in table.items()} == {
        "/ok": 200,
        "/simpleStackTraceError": 500,
        "/nestedStackTraceError": 500,
        "/nestedNoMessageStackTraceError": 500,
        "/interfaceFunctionStackTraceError": 500,
        "/nativeError": 500,
        "/panic": 500,
    }


def test_table_is_read_only() -> None:
    table = build_scenario_table()
    with pytest.raises(TypeError):
        table["/new"] = table["/ok"]  # type: ignore[index]


def test_ok_resolves_to_success() -> None:
    assert build_scenario_table()["/ok"].resolve() == Success("hello, world!")


def test_error_scenarios_use_the_given_root_cause() -> None:
    table = build_scenario_table(root_cause="disk full")
    assert table["/nativeError"].resolve().payload == "disk full"
    assert (
        table["/simpleStackTraceError"].resolve().payload
        == "simpleError error message: disk full"
    )


def test_panic_scenario_raises() -> None:
    with pytest.raises(PanicError, match="panicking in the server"):
        build_scenario_table()["/panic"].resolve()
