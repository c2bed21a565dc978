"""JSON API over the custody store."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from src.core.errors import InvalidCredentialsError
from src.domain.history import KeyHistoryEntry
from src.domain.key import Key
from src.domain.task import Task
from src.domain.user import UserAccount, UserRole
from src.models.service_models import DashboardSummary, ReportInfo, StaffSummary, StoreSnapshot
from src.services.custody_store import KeyCustodyStore


router = APIRouter(prefix="/api", tags=["custody"])
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    """Credentials submitted on the login form."""

    username: str
    password: str
    role: UserRole


class AssignRequest(BaseModel):
    """Body for a direct key checkout."""

    user_id: str


class ReportRequest(BaseModel):
    """Options for generating a key history report."""

    name: str | None = None
    staff_id: str | None = None


def get_store(request: Request) -> KeyCustodyStore:
    """Return the store attached to the running application."""
    return request.app.state.store


# ---- session ----


@router.post("/session/login")
def login(body: LoginRequest, store: KeyCustodyStore = Depends(get_store)) -> UserAccount:
    """Sign in with username, password and role."""
    account = store.login(username=body.username, password=body.password, role=body.role)
    if account is None:
        raise InvalidCredentialsError(body.username)
    return account


@router.post("/session/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(store: KeyCustodyStore = Depends(get_store)) -> None:
    store.logout()


@router.get("/session")
def current_session(store: KeyCustodyStore = Depends(get_store)) -> UserAccount | None:
    return store.current_user


# ---- accounts ----


@router.get("/accounts")
def list_accounts(role: UserRole | None = None, store: KeyCustodyStore = Depends(get_store)) -> list[UserAccount]:
    return store.list_accounts(role=role)


@router.post("/accounts", status_code=status.HTTP_201_CREATED)
def create_account(
    body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)
) -> UserAccount:
    return store.create_account(body)


@router.get("/accounts/{account_id}")
def get_account(account_id: str, store: KeyCustodyStore = Depends(get_store)) -> UserAccount:
    return store.get_account(account_id)


@router.put("/accounts/{account_id}")
def update_account(
    account_id: str, body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)
) -> UserAccount:
    return store.update_account(account_id, body)


@router.delete("/accounts/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, store: KeyCustodyStore = Depends(get_store)) -> None:
    if not store.delete_account(account_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")


@router.get("/accounts/{account_id}/summary")
def staff_summary(account_id: str, store: KeyCustodyStore = Depends(get_store)) -> StaffSummary:
    return store.staff_summary(account_id)


# ---- keys ----


@router.get("/keys")
def list_keys(store: KeyCustodyStore = Depends(get_store)) -> list[Key]:
    return store.list_keys()


@router.get("/keys/available")
def available_keys(store: KeyCustodyStore = Depends(get_store)) -> list[Key]:
    """Keys that can be bound to a new or edited task."""
    return store.get_available_keys()


@router.post("/keys", status_code=status.HTTP_201_CREATED)
def create_key(body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)) -> Key:
    return store.create_key(body)


@router.get("/keys/{key_id}")
def get_key(key_id: str, store: KeyCustodyStore = Depends(get_store)) -> Key:
    return store.get_key(key_id)


@router.put("/keys/{key_id}")
def update_key(key_id: str, body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)) -> Key:
    return store.update_key(key_id, body)


@router.delete("/keys/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_key(key_id: str, store: KeyCustodyStore = Depends(get_store)) -> None:
    if not store.delete_key(key_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Key not found")


@router.post("/keys/{key_id}/assign")
def assign_key(key_id: str, body: AssignRequest, store: KeyCustodyStore = Depends(get_store)) -> Key:
    """Check a key out directly. Unknown IDs or held keys leave the key unchanged."""
    store.assign_key(key_id, body.user_id)
    return store.get_key(key_id)


@router.post("/keys/{key_id}/unassign")
def unassign_key(key_id: str, store: KeyCustodyStore = Depends(get_store)) -> Key:
    store.unassign_key(key_id)
    return store.get_key(key_id)


# ---- tasks ----


@router.get("/tasks")
def list_tasks(staff_id: str | None = None, store: KeyCustodyStore = Depends(get_store)) -> list[Task]:
    return store.list_tasks(staff_id=staff_id)


@router.post("/tasks", status_code=status.HTTP_201_CREATED)
def create_task(body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)) -> Task:
    return store.create_task(body)


@router.get("/tasks/{task_id}")
def get_task(task_id: str, store: KeyCustodyStore = Depends(get_store)) -> Task:
    return store.get_task(task_id)


@router.put("/tasks/{task_id}")
def update_task(task_id: str, body: dict[str, Any] = Body(...), store: KeyCustodyStore = Depends(get_store)) -> Task:
    return store.update_task(task_id, body)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, return_key: bool = True, store: KeyCustodyStore = Depends(get_store)) -> None:
    if not store.delete_task(task_id, return_key=return_key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.post("/tasks/{task_id}/items/{item_id}/toggle")
def toggle_todo_item(task_id: str, item_id: str, store: KeyCustodyStore = Depends(get_store)) -> Task:
    """Flip one checklist item. Unknown item IDs leave the task unchanged."""
    store.toggle_todo_item(task_id, item_id)
    return store.get_task(task_id)


@router.post("/tasks/{task_id}/complete")
def complete_task(task_id: str, store: KeyCustodyStore = Depends(get_store)) -> Task:
    return store.complete_task(task_id)


# ---- history, reports, statistics ----


@router.get("/history")
def key_history(staff_id: str | None = None, store: KeyCustodyStore = Depends(get_store)) -> list[KeyHistoryEntry]:
    """Key history, newest first."""
    return store.key_history(staff_id=staff_id)


@router.get("/reports")
def list_reports(store: KeyCustodyStore = Depends(get_store)) -> list[ReportInfo]:
    return store.list_reports()


@router.post("/reports", status_code=status.HTTP_201_CREATED)
def generate_report(
    body: ReportRequest | None = None, store: KeyCustodyStore = Depends(get_store)
) -> ReportInfo:
    body = body or ReportRequest()
    report = store.generate_report(name=body.name, staff_id=body.staff_id)
    logger.info("Generated report %s", report.id, extra={"staff_id": body.staff_id})
    return ReportInfo(id=report.id, name=report.name, generated_at=report.generated_at, size_bytes=len(report.data))


@router.get("/reports/{report_id}")
def download_report(report_id: str, store: KeyCustodyStore = Depends(get_store)) -> Response:
    """Download the rendered report payload."""
    report = store.get_report(report_id)
    return Response(
        content=report.data,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="report-{report.id}.json"'},
    )


@router.get("/dashboard")
def dashboard(store: KeyCustodyStore = Depends(get_store)) -> DashboardSummary:
    return store.dashboard_summary()


@router.get("/snapshot")
def snapshot(store: KeyCustodyStore = Depends(get_store)) -> StoreSnapshot:
    return store.snapshot()
