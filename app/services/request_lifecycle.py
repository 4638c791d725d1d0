"""Start, route, complete and cancel process requests.

Cancelling writes the denormalized ``LIST_CANCELED`` row in the same unit of
work as the status change; callers own the commit.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.models import Delegation, ListCanceled, Process, ProcessRequest, Task, User

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "ACTIVE"
STATUS_COMPLETED = "COMPLETED"
STATUS_CANCELED = "CANCELED"

THREAD_OPEN = "OPEN"
THREAD_CLOSED = "CLOSED"

DEFAULT_PRIORITY = "3"


class RequestStateError(ValueError):
    """Raised when a lifecycle transition is not allowed for the request's state."""


def _due_date(task: Task, delegated_at: datetime) -> Optional[datetime]:
    if not task.due_in_hours:
        return None
    return delegated_at + timedelta(hours=task.due_in_hours)


def _ensure_active(request: ProcessRequest, action: str) -> None:
    if request.status != STATUS_ACTIVE:
        raise RequestStateError(
            f"Request #{request.id} is {request.status.lower()} and cannot be {action}."
        )


def _close_open_delegation(request: ProcessRequest, finished_at: datetime) -> Optional[Delegation]:
    delegation = request.open_delegation
    if delegation is not None:
        delegation.thread_status = THREAD_CLOSED
        delegation.finished_at = finished_at
    return delegation


def start_request(
    db: Session,
    *,
    process: Process,
    user: User,
    title: Optional[str] = None,
    data: Optional[dict[str, Any]] = None,
    priority: str = DEFAULT_PRIORITY,
) -> ProcessRequest:
    if process.status != "ACTIVE":
        raise RequestStateError(f"Process '{process.name}' is inactive and cannot start requests.")
    if not process.tasks:
        raise RequestStateError(f"Process '{process.name}' has no tasks to start a request on.")

    first_task = min(process.tasks, key=lambda task: (task.position, task.id))
    now = datetime.utcnow()

    request = ProcessRequest(
        process=process,
        user=user,
        title=title,
        status=STATUS_ACTIVE,
        data=dict(data or {}),
        initiated_at=now,
    )
    db.add(request)
    db.flush()

    if not request.title:
        request.title = f"{process.name} #{request.id}"

    request.delegations.append(
        Delegation(
            index=1,
            task=first_task,
            user=user,
            delegated_at=now,
            initiated_at=now,
            due_at=_due_date(first_task, now),
            priority=priority,
            thread_status=THREAD_OPEN,
        )
    )
    db.flush()
    logger.info("Started request #%s on process %s", request.id, process.uuid)
    return request


def delegate_request(
    db: Session,
    request: ProcessRequest,
    *,
    task: Task,
    user: User,
    priority: Optional[str] = None,
) -> Delegation:
    _ensure_active(request, "delegated")
    if task.process_id != request.process_id:
        raise RequestStateError("The task does not belong to the request's process.")

    now = datetime.utcnow()
    previous = _close_open_delegation(request, now)
    next_index = max((item.index for item in request.delegations), default=0) + 1

    delegation = Delegation(
        index=next_index,
        task=task,
        user=user,
        previous_user=previous.user if previous else None,
        delegated_at=now,
        due_at=_due_date(task, now),
        priority=priority or (previous.priority if previous else DEFAULT_PRIORITY),
        thread_status=THREAD_OPEN,
    )
    request.delegations.append(delegation)
    db.flush()
    logger.info("Delegated request #%s to task %s (index %s)", request.id, task.uuid, next_index)
    return delegation


def complete_request(db: Session, request: ProcessRequest) -> ProcessRequest:
    _ensure_active(request, "completed")
    now = datetime.utcnow()
    _close_open_delegation(request, now)
    request.status = STATUS_COMPLETED
    request.completed_at = now
    db.flush()
    logger.info("Completed request #%s", request.id)
    return request


def build_canceled_row(
    request: ProcessRequest, delegation: Delegation, canceled_at: datetime
) -> ListCanceled:
    """Project a request and its current delegation onto a ``LIST_CANCELED`` row."""

    current_user = delegation.user
    previous_user = delegation.previous_user
    task = delegation.task
    process = request.process

    return ListCanceled(
        app_uid=request.uid,
        usr_uid=current_user.uid,
        tas_uid=task.uid,
        pro_uid=process.uid,
        app_number=request.id,
        app_title=request.title,
        app_pro_title=process.name,
        app_tas_title=task.name,
        app_canceled_date=canceled_at,
        del_index=delegation.index,
        del_previous_usr_uid=previous_user.uid if previous_user else "",
        del_current_usr_username=current_user.username,
        del_current_usr_firstname=current_user.firstname or "",
        del_current_usr_lastname=current_user.lastname or "",
        del_delegate_date=delegation.delegated_at,
        del_init_date=delegation.initiated_at,
        del_due_date=delegation.due_at,
        del_priority=delegation.priority or DEFAULT_PRIORITY,
        pro_id=process.id,
        usr_id=current_user.id,
        tas_id=task.id,
    )


def cancel_request(db: Session, request: ProcessRequest) -> ListCanceled:
    _ensure_active(request, "canceled")
    if db.get(ListCanceled, request.uid) is not None:
        raise RequestStateError(f"Request #{request.id} is already in the canceled list.")

    delegation = request.open_delegation
    if delegation is None:
        raise RequestStateError(f"Request #{request.id} has no open delegation to cancel.")

    now = datetime.utcnow()
    row = build_canceled_row(request, delegation, now)
    _close_open_delegation(request, now)
    request.status = STATUS_CANCELED
    request.canceled_at = now

    db.add(row)
    db.flush()
    logger.info("Canceled request #%s (delegation %s)", request.id, delegation.index)
    return row
