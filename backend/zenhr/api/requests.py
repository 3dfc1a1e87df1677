# ruff: noqa: B008
from __future__ import annotations

from fastapi import APIRouter, Query, status

from zenhr.api.deps import ApproverDep, CurrentUserDep, LedgerDep, RequesterDep
from zenhr.exceptions import AppError, NotFoundError
from zenhr.models.enums import AppFeature, LeaveStatus, LeaveType
from zenhr.schemas.request import LeaveRequest, RequestListResponse, StatusUpdatePayload, SubmitRequestPayload
from zenhr.services.report import filter_requests

requests_router = APIRouter(prefix="/requests", tags=["requests"])


@requests_router.post("", response_model=LeaveRequest, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SubmitRequestPayload,
    ledger: LedgerDep,
    user: RequesterDep,
) -> LeaveRequest:
    """Submit a leave request as the logged-in user."""
    result = await ledger.submit_request(
        payload.type, payload.start_date, payload.end_date, payload.reason, user_id=user.id
    )
    created = result.unwrap()
    if created is None:
        raise AppError("Request was not created")
    return created


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    ledger: LedgerDep,
    user: CurrentUserDep,
    user_id: str | None = Query(default=None),
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    leave_type: LeaveType | None = Query(default=None, alias="type"),
    department: str | None = Query(default=None),
    year: int | None = Query(default=None),
    month: int | None = Query(default=None, ge=1, le=12),
) -> RequestListResponse:
    """List requests, newest first.

    Users without the reports permission only see their own requests.
    """
    if not ledger.has_permission(user.role, AppFeature.VIEW_REPORTS):
        user_id = user.id
    items = filter_requests(
        ledger.requests,
        user_id=user_id,
        status=status_filter,
        leave_type=leave_type,
        department=department,
        year=year,
        month=month,
    )
    return RequestListResponse(items=items, total=len(items))


@requests_router.get("/{request_id}", response_model=LeaveRequest)
async def get_request(request_id: str, ledger: LedgerDep, user: CurrentUserDep) -> LeaveRequest:
    """Get a single leave request."""
    request = ledger.get_request(request_id)
    if request is None:
        raise NotFoundError(f"Request '{request_id}' not found")
    return request


@requests_router.post("/{request_id}/status", response_model=LeaveRequest)
async def update_request_status(
    request_id: str,
    payload: StatusUpdatePayload,
    ledger: LedgerDep,
    user: ApproverDep,
) -> LeaveRequest:
    """Approve, reject or reopen a request (approvers only)."""
    updated = (await ledger.update_request_status(request_id, payload.status)).unwrap()
    if updated is None:
        raise NotFoundError(f"Request '{request_id}' not found")
    return updated


@requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(request_id: str, ledger: LedgerDep, user: CurrentUserDep) -> None:
    """Delete a request. Owners may delete their own; approvers may delete any."""
    request = ledger.get_request(request_id)
    if request is None:
        return
    if request.user_id != user.id and not ledger.has_permission(user.role, AppFeature.APPROVE_LEAVE):
        raise AppError("Not authorized to delete this request", status_code=status.HTTP_403_FORBIDDEN)
    (await ledger.delete_request(request_id)).unwrap()
