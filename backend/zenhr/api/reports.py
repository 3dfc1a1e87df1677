# ruff: noqa: B008
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query, status

from zenhr.api.deps import CurrentUserDep, DashboardViewerDep, LedgerDep
from zenhr.exceptions import AppError, LeaveValidationError, NotFoundError
from zenhr.models.enums import AppFeature, LeaveType
from zenhr.schemas.report import DashboardSummary, QuotaBalance
from zenhr.services.report import dashboard_summary, quota_balance

reports_router = APIRouter(prefix="/reports", tags=["reports"])


@reports_router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    ledger: LedgerDep,
    user: DashboardViewerDep,
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
) -> DashboardSummary:
    """Request counts for a period (default: the current year) and who is off today."""
    today = ledger.today()
    period_start = start or date(today.year, 1, 1)
    period_end = end or date(today.year, 12, 31)
    return dashboard_summary(ledger.requests, today, period_start, period_end)


@reports_router.get("/balance", response_model=QuotaBalance)
async def get_balance(
    ledger: LedgerDep,
    user: CurrentUserDep,
    leave_type: LeaveType = Query(default=LeaveType.ANNUAL, alias="type"),
    year: int | None = Query(default=None),
    user_id: str | None = Query(default=None),
) -> QuotaBalance:
    """Bookable balance for a quota-limited leave type, pending requests included."""
    target_id = user_id or user.id
    if target_id != user.id and not ledger.has_permission(user.role, AppFeature.VIEW_REPORTS):
        raise AppError("Not authorized to view this balance", status_code=status.HTTP_403_FORBIDDEN)
    if ledger.get_user(target_id) is None:
        raise NotFoundError(f"User '{target_id}' not found")
    balance = quota_balance(ledger.requests, target_id, leave_type, year or ledger.today().year, ledger.settings)
    if balance is None:
        raise LeaveValidationError(f"{leave_type.value} has no yearly quota")
    return balance
