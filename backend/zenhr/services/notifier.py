"""Spreadsheet webhook that receives a copy of every leave event."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx

from zenhr.models.enums import LeaveType

if TYPE_CHECKING:
    from zenhr.models.enums import LeaveStatus
    from zenhr.schemas.request import LeaveRequest

logger = logging.getLogger(__name__)

# The sheet records timestamps in Bangkok time.
SHEET_TIMEZONE = timezone(timedelta(hours=7))

TEST_CONNECTION_TYPE = "Test Connection"

TYPE_LABELS: dict[str, str] = {
    LeaveType.ANNUAL: "ลาพักร้อน",
    LeaveType.SICK: "ลาป่วย",
    LeaveType.PERSONAL: "ลากิจ",
    LeaveType.PUBLIC_HOLIDAY: "วันหยุดนักขัตฤกษ์",
    TEST_CONNECTION_TYPE: "ทดสอบการเชื่อมต่อ",
}

HEADER_ROW: dict[str, str] = {
    "createdAt": "Timestamp (GMT+7)",
    "userName": "Employee Name",
    "department": "Department",
    "type": "Leave Type",
    "startDate": "Start Date",
    "endDate": "End Date",
    "daysCount": "Total Days",
    "reason": "Reason",
    "status": "Status",
}


def format_sheet_timestamp(value: datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS`` in GMT+7."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(SHEET_TIMEZONE).strftime("%Y-%m-%d %H:%M:%S")


def build_leave_event(request: LeaveRequest, status: LeaveStatus | None = None) -> dict[str, Any]:
    """Flatten a request into the row the sheet expects."""
    return {
        "id": request.id,
        "userId": request.user_id,
        "createdAt": format_sheet_timestamp(request.created_at),
        "userName": request.user_name,
        "department": request.department,
        "type": TYPE_LABELS.get(request.type, request.type.value),
        "startDate": request.start_date.isoformat(),
        "endDate": request.end_date.isoformat(),
        "daysCount": request.days_count,
        "reason": request.reason,
        "status": (status or request.status).value,
    }


def build_test_event(now: datetime) -> dict[str, Any]:
    """Dummy row posted by the connection test."""
    today = now.date().isoformat()
    return {
        "createdAt": format_sheet_timestamp(now),
        "userName": "Test User",
        "department": "IT",
        "type": TYPE_LABELS[TEST_CONNECTION_TYPE],
        "startDate": today,
        "endDate": today,
        "daysCount": 1,
        "reason": "Testing connection from settings",
        "status": "Test",
    }


class SheetsNotifier:
    """Posts events to a spreadsheet web app URL.

    ``send`` never raises for transport or HTTP errors; it reports whether the
    post went through.
    """

    def __init__(self, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def send(self, url: str, event: dict[str, Any]) -> bool:
        if not url:
            return False
        try:
            response = await self._client.post(
                url,
                content=json.dumps(event, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "text/plain"},
            )
            response.raise_for_status()
        except httpx.HTTPError:
            logger.warning("Webhook post to %s failed", url, exc_info=True)
            return False
        return True

    async def aclose(self) -> None:
        await self._client.aclose()
