from __future__ import annotations

import httpx
import pytest

from logtap.dialects import Dialect
from logtap.errors import ChannelError, EndpointUnreachable, NoTargetsAvailable, TargetIndexOutOfRange
from logtap.targets import Target, list_targets, select_target

from conftest import CHROME_TABS, FIREFOX_TABS, make_http_client


def test_chrome_targets_use_debugger_url_verbatim() -> None:
    targets = list_targets(Dialect.CHROME, "localhost", 9222, client=make_http_client())

    assert [t.title for t in targets] == ["Example", "Docs"]
    assert targets[0].channel_address() == CHROME_TABS[0]["webSocketDebuggerUrl"]
    assert targets[0].id == "A1B2C3"


def test_firefox_targets_compose_actor_address() -> None:
    targets = list_targets(Dialect.FIREFOX, "127.0.0.1", 6000, client=make_http_client())

    assert targets[0].id == FIREFOX_TABS[0]["actor"]
    assert targets[0].channel_address() == "ws://127.0.0.1:6000/server1.conn0.tabDescriptor1"


def test_discovery_hits_dialect_path() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=[])

    client = httpx.Client(transport=httpx.MockTransport(handler))
    list_targets(Dialect.CHROME, "localhost", 9222, client=client)
    list_targets(Dialect.FIREFOX, "localhost", 6000, client=client)

    assert seen == ["http://localhost:9222/json", "http://localhost:6000/json/list"]


def test_http_error_names_port() -> None:
    with pytest.raises(EndpointUnreachable, match="9333") as exc_info:
        list_targets(Dialect.CHROME, "localhost", 9333, client=make_http_client(status=500))

    assert exc_info.value.port == 9333


def test_connection_refused_names_port() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(EndpointUnreachable, match="9222"):
        list_targets(Dialect.CHROME, "localhost", 9222, client=client)


def test_non_list_body_is_unreachable() -> None:
    client = make_http_client({"/json": {"unexpected": True}})
    with pytest.raises(EndpointUnreachable):
        list_targets(Dialect.CHROME, "localhost", 9222, client=client)


def test_select_target_bounds() -> None:
    targets = [Target(id=str(i), title=f"t{i}", url="", ws_url="ws://x") for i in range(2)]

    assert select_target(targets).id == "0"
    assert select_target(targets, 1).id == "1"
    with pytest.raises(TargetIndexOutOfRange, match="Tab index 2 out of range, 2 tabs available"):
        select_target(targets, 2)
    with pytest.raises(TargetIndexOutOfRange):
        select_target(targets, -1)


def test_select_target_empty() -> None:
    with pytest.raises(NoTargetsAvailable):
        select_target([], 0)


def test_target_without_debugger_url() -> None:
    target = Target.from_json({"id": "x", "title": "Busy"}, Dialect.CHROME, "localhost", 9222)
    with pytest.raises(ChannelError, match="Busy"):
        target.channel_address()
