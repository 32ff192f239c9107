from __future__ import annotations

import pytest

pytest.importorskip("replkit2")

from logtap.app import LogtapState  # noqa: E402
from logtap.commands.connection import clear_logs, connect_browser, disconnect_browser  # noqa: E402
from logtap.commands.console import console_logs  # noqa: E402
from logtap.commands.javascript import evaluate_js  # noqa: E402
from logtap.commands.network import network_requests  # noqa: E402


@pytest.fixture
def state(session) -> LogtapState:
    return LogtapState(session=session)


def test_connect_and_disconnect_commands(state, channels) -> None:
    assert isinstance(connect_browser(state), dict)
    assert state.session.is_connected
    assert len(channels) == 1

    connect_browser(state)
    assert len(channels) == 1

    assert isinstance(disconnect_browser(state), dict)
    assert not state.session.is_connected


def test_connect_error_is_a_response_not_an_exception(state) -> None:
    result = connect_browser(state, tab_index=9)

    assert isinstance(result, dict)
    assert not state.session.is_connected


def test_evaluate_without_connection(state, channels) -> None:
    assert isinstance(evaluate_js(state, "1 + 1"), dict)
    assert channels == []


def test_console_logs_clear(state, channels) -> None:
    connect_browser(state)
    channels[0].emit({"method": "Log.entryAdded", "params": {"entry": {"level": "error", "text": "bad"}}})

    assert isinstance(console_logs(state, "error", clear=True), dict)
    assert len(state.session.store.console) == 0
    assert isinstance(console_logs(state, "nonsense"), dict)


def test_network_and_clear_logs(state, channels) -> None:
    connect_browser(state)
    channels[0].emit(
        {"method": "Network.requestWillBeSent", "params": {"requestId": "1", "request": {"method": "GET", "url": "/"}}}
    )

    assert isinstance(network_requests(state, "get"), dict)
    clear_logs(state)
    assert state.session.store.counts == {"console": 0, "network": 0}


def test_full_text_views(state, channels) -> None:
    connect_browser(state)
    channels[0].emit({"method": "Runtime.exceptionThrown", "params": {"exceptionDetails": {}}})

    assert isinstance(console_logs(state, full=True), dict)
    assert isinstance(network_requests(state, full=True), dict)
