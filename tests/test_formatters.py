from __future__ import annotations

from logtap.formatters import format_console_record, format_network_record, format_time
from logtap.records import ConsoleRecord, NetworkRecord, Severity


def test_console_record_with_location_and_stack(monkeypatch) -> None:
    import logtap.formatters as formatters

    monkeypatch.setattr(formatters, "format_time", lambda ts: "12:00:00")
    record = ConsoleRecord(
        severity=Severity.ERROR,
        source="javascript-exception",
        text="TypeError: x",
        timestamp=1,
        url="https://x/app.js",
        line_number=10,
        column_number=2,
        stack_trace="at go (https://x/app.js:10:2)",
    )

    assert format_console_record(record) == (
        "[12:00:00] [ERROR] [javascript-exception] TypeError: x\n"
        "    at: https://x/app.js:10:2\n"
        "    stack: at go (https://x/app.js:10:2)"
    )


def test_pending_and_completed_network_records(monkeypatch) -> None:
    import logtap.formatters as formatters

    monkeypatch.setattr(formatters, "format_time", lambda ts: "12:00:00")
    record = NetworkRecord(request_id="1", method="GET", url="https://x/api", timestamp=10.0, resource_type="XHR")

    assert format_network_record(record) == "[12:00:00] [PND] [GET   ] https://x/api (XHR)"

    record.apply_response(200, "application/json", {}, 10.125)
    assert format_network_record(record) == "[12:00:00] [200] [GET   ] https://x/api (XHR) - 125ms"


def test_failed_network_record(monkeypatch) -> None:
    import logtap.formatters as formatters

    monkeypatch.setattr(formatters, "format_time", lambda ts: "12:00:00")
    record = NetworkRecord(request_id="1", method="POST", url="/x", timestamp=1.0, error_text="net::ERR_ABORTED")

    assert format_network_record(record) == "[12:00:00] [ERR] [POST  ] /x !! net::ERR_ABORTED"


def test_format_time_placeholder() -> None:
    assert format_time(None) == "--:--:--"
    assert len(format_time(1_700_000_000_000)) == 8


def test_network_record_without_wall_time_has_no_clock() -> None:
    record = NetworkRecord(request_id="1", method="GET", url="/x", timestamp=48213.5)

    assert format_network_record(record).startswith("[--:--:--] [PND]")
