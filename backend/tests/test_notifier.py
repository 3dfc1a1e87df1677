"""Tests for the spreadsheet webhook payloads and transport."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime

import httpx

from zenhr.models.enums import LeaveStatus, LeaveType
from zenhr.schemas.request import LeaveRequest
from zenhr.services.notifier import (
    HEADER_ROW,
    SheetsNotifier,
    build_leave_event,
    build_test_event,
    format_sheet_timestamp,
)

WEBHOOK_URL = "https://sheet.test/exec"


def _request(leave_type: LeaveType = LeaveType.ANNUAL) -> LeaveRequest:
    return LeaveRequest(
        id="r1",
        user_id="u1",
        user_name="Alice Engineer",
        department="IT",
        type=leave_type,
        start_date=date(2025, 6, 9),
        end_date=date(2025, 6, 10),
        days_count=2,
        reason="Trip",
        created_at=datetime(2025, 6, 1, 20, 30, tzinfo=UTC),
    )


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


def test_timestamp_is_gmt_plus_seven() -> None:
    # 20:30 UTC is 03:30 the next day in Bangkok.
    assert format_sheet_timestamp(datetime(2025, 6, 1, 20, 30, tzinfo=UTC)) == "2025-06-02 03:30:00"


def test_naive_timestamp_is_treated_as_utc() -> None:
    assert format_sheet_timestamp(datetime(2025, 6, 1, 0, 0)) == "2025-06-01 07:00:00"


def test_leave_event_fields() -> None:
    event = build_leave_event(_request())
    assert event == {
        "id": "r1",
        "userId": "u1",
        "createdAt": "2025-06-02 03:30:00",
        "userName": "Alice Engineer",
        "department": "IT",
        "type": "ลาพักร้อน",
        "startDate": "2025-06-09",
        "endDate": "2025-06-10",
        "daysCount": 2,
        "reason": "Trip",
        "status": "Pending",
    }


def test_leave_event_status_override() -> None:
    event = build_leave_event(_request(), LeaveStatus.APPROVED)
    assert event["status"] == "Approved"


def test_note_has_no_thai_label() -> None:
    assert build_leave_event(_request(LeaveType.NOTE))["type"] == "Note"


def test_test_event() -> None:
    event = build_test_event(datetime(2025, 6, 2, 9, 0, tzinfo=UTC))
    assert event["createdAt"] == "2025-06-02 16:00:00"
    assert event["startDate"] == "2025-06-02"
    assert event["status"] == "Test"
    assert set(event) == set(HEADER_ROW)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


async def test_send_posts_plain_text_json() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, text="ok")

    notifier = SheetsNotifier(transport=httpx.MockTransport(handler))
    sent = await notifier.send(WEBHOOK_URL, build_leave_event(_request()))
    await notifier.aclose()

    assert sent
    assert len(captured) == 1
    assert captured[0].method == "POST"
    assert captured[0].headers["content-type"] == "text/plain"
    body = json.loads(captured[0].content.decode("utf-8"))
    assert body["type"] == "ลาพักร้อน"


async def test_send_reports_http_errors() -> None:
    notifier = SheetsNotifier(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    assert not await notifier.send(WEBHOOK_URL, {"a": 1})
    await notifier.aclose()


async def test_send_reports_connection_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    notifier = SheetsNotifier(transport=httpx.MockTransport(handler))
    assert not await notifier.send(WEBHOOK_URL, {"a": 1})
    await notifier.aclose()


async def test_send_without_url_is_skipped() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    notifier = SheetsNotifier(transport=httpx.MockTransport(handler))
    assert not await notifier.send("", {"a": 1})
    await notifier.aclose()
    assert calls == []
