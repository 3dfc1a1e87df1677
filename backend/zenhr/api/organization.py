from __future__ import annotations

from fastapi import APIRouter, status

from zenhr.api.deps import CurrentUserDep, LedgerDep, SettingsManagerDep
from zenhr.models.enums import AppFeature, Role
from zenhr.schemas.organization import (
    DepartmentListResponse,
    DepartmentPayload,
    LeaveSettings,
    LimitsPayload,
    PermissionPayload,
    RolePermissions,
    WebhookPayload,
    WebhookResponse,
)

departments_router = APIRouter(prefix="/departments", tags=["departments"])
permissions_router = APIRouter(prefix="/permissions", tags=["permissions"])
settings_router = APIRouter(prefix="/settings", tags=["settings"])


# ---------------------------------------------------------------------------
# Departments
# ---------------------------------------------------------------------------


@departments_router.get("", response_model=DepartmentListResponse)
async def list_departments(ledger: LedgerDep) -> DepartmentListResponse:
    """List department names."""
    departments = ledger.departments
    return DepartmentListResponse(items=departments, total=len(departments))


@departments_router.post("", response_model=DepartmentPayload, status_code=status.HTTP_201_CREATED)
async def create_department(
    payload: DepartmentPayload, ledger: LedgerDep, user: SettingsManagerDep
) -> DepartmentPayload:
    """Add a department (settings managers only)."""
    name = (await ledger.add_department(payload.name)).unwrap()
    return DepartmentPayload(name=name or payload.name)


@departments_router.put("/{name}", response_model=DepartmentPayload)
async def rename_department(
    name: str, payload: DepartmentPayload, ledger: LedgerDep, user: SettingsManagerDep
) -> DepartmentPayload:
    """Rename a department and every user and request that references it."""
    new_name = (await ledger.rename_department(name, payload.name)).unwrap()
    return DepartmentPayload(name=new_name or payload.name)


@departments_router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_department(name: str, ledger: LedgerDep, user: SettingsManagerDep) -> None:
    """Delete a department that no user belongs to."""
    (await ledger.delete_department(name)).unwrap()


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


@permissions_router.get("", response_model=RolePermissions)
async def get_permissions(ledger: LedgerDep, user: CurrentUserDep) -> RolePermissions:
    """Return the feature toggles of every role."""
    return ledger.permissions


@permissions_router.put("/{role}/{feature}", response_model=RolePermissions)
async def set_permission(
    role: Role,
    feature: AppFeature,
    payload: PermissionPayload,
    ledger: LedgerDep,
    user: SettingsManagerDep,
) -> RolePermissions:
    """Toggle one feature for one role."""
    permissions = (await ledger.set_permission(role, feature, payload.allowed)).unwrap()
    return permissions or ledger.permissions


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@settings_router.get("/limits", response_model=LeaveSettings)
async def get_limits(ledger: LedgerDep) -> LeaveSettings:
    """Return the yearly quotas."""
    return ledger.settings


@settings_router.put("/limits", response_model=LeaveSettings)
async def update_limits(payload: LimitsPayload, ledger: LedgerDep, user: SettingsManagerDep) -> LeaveSettings:
    """Replace the yearly quotas."""
    result = await ledger.update_leave_limits(payload.annual_leave_limit, payload.public_holiday_count)
    return result.unwrap() or ledger.settings


@settings_router.get("/webhook", response_model=WebhookResponse)
async def get_webhook(ledger: LedgerDep, user: SettingsManagerDep) -> WebhookResponse:
    return WebhookResponse(url=ledger.webhook_url)


@settings_router.put("/webhook", response_model=WebhookResponse)
async def save_webhook(payload: WebhookPayload, ledger: LedgerDep, user: SettingsManagerDep) -> WebhookResponse:
    """Set the spreadsheet webhook URL. An empty URL turns notifications off."""
    url = (await ledger.save_webhook_url(payload.url)).unwrap()
    return WebhookResponse(url=url or "")


@settings_router.post("/webhook/test", response_model=WebhookResponse)
async def test_webhook(ledger: LedgerDep, user: SettingsManagerDep) -> WebhookResponse:
    """Post a dummy row to the webhook."""
    return WebhookResponse(url=ledger.webhook_url, sent=await ledger.test_webhook())


@settings_router.post("/webhook/headers", response_model=WebhookResponse)
async def send_webhook_headers(ledger: LedgerDep, user: SettingsManagerDep) -> WebhookResponse:
    """Post the header row to the webhook."""
    return WebhookResponse(url=ledger.webhook_url, sent=await ledger.send_webhook_headers())
