"""Recording and reading the administrator audit trail."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rjilat.core.errors import ValidationError
from rjilat.core.identity import Caller, RequestMeta, require_admin
from rjilat.db.time import start_of_day, start_of_month, utcnow
from rjilat.models import AdminAction, AdminActionLog, TargetType
from rjilat.schemas.admin_log import AdminLogOut, AdminLogPage, AdminLogTarget
from rjilat.schemas.common import Pagination

logger = logging.getLogger(__name__)

DateRange = Literal["today", "week", "month", "all"]


def record_admin_action(
    db: Session,
    *,
    admin_id: int,
    action: AdminAction,
    target_type: TargetType,
    details: str,
    target_id: int | str | None = None,
    target_username: str | None = None,
    target_title: str | None = None,
    meta: RequestMeta | None = None,
) -> AdminActionLog:
    """Append a log entry inside the caller's transaction.

    The entry commits or rolls back together with the action it describes.
    """
    entry = AdminActionLog(
        admin_id=admin_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        target_username=target_username,
        target_title=target_title,
        details=details,
        ip_address=meta.ip_address if meta else None,
        user_agent=meta.user_agent if meta else None,
    )
    db.add(entry)
    db.flush()
    logger.info("[ADMIN LOG] %s by %s: %s", action.value, admin_id, details)
    return entry


def to_admin_log_out(entry: AdminActionLog) -> AdminLogOut:
    """Convert an AdminActionLog ORM instance to an API schema."""
    return AdminLogOut(
        id=entry.id,
        admin_id=entry.admin_id,
        action=entry.action,
        target=AdminLogTarget(
            type=entry.target_type,
            id=entry.target_id,
            username=entry.target_username,
            title=entry.target_title,
        ),
        details=entry.details,
        ip_address=entry.ip_address,
        user_agent=entry.user_agent,
        created_at=entry.created_at,
    )


def _range_start(date_range: str, now: datetime) -> datetime | None:
    if date_range == "today":
        return start_of_day(now)
    if date_range == "week":
        return now - timedelta(days=7)
    if date_range == "month":
        return start_of_month(now)
    if date_range == "all":
        return None
    raise ValidationError(f"Invalid date range '{date_range}'", code="invalid_date_range")


def list_admin_logs(
    db: Session,
    caller: Caller | None,
    *,
    page: int = 1,
    limit: int = 50,
    action: str | None = None,
    target_type: str | None = None,
    date_range: str = "week",
    now: datetime | None = None,
) -> AdminLogPage:
    """Return admin log entries, newest first, with optional filters.

    ``action`` and ``target_type`` accept ``all`` (or None) to disable the
    filter.

    Raises:
        ForbiddenError: If the caller is not an administrator.
        ValidationError: On unknown filter values or an invalid window.
    """
    require_admin(caller)
    if page < 1 or limit < 1:
        raise ValidationError("Page and limit must be positive", code="invalid_page")

    filters = []
    if action and action != "all":
        try:
            filters.append(AdminActionLog.action == AdminAction(action))
        except ValueError as err:
            raise ValidationError(f"Invalid action '{action}'", code="invalid_action") from err
    if target_type and target_type != "all":
        try:
            filters.append(AdminActionLog.target_type == TargetType(target_type))
        except ValueError as err:
            raise ValidationError(
                f"Invalid target type '{target_type}'", code="invalid_target_type"
            ) from err
    start = _range_start(date_range, now or utcnow())
    if start is not None:
        filters.append(AdminActionLog.created_at >= start)

    total = db.scalar(select(func.count()).select_from(AdminActionLog).where(*filters)) or 0
    entries = db.scalars(
        select(AdminActionLog)
        .where(*filters)
        .order_by(AdminActionLog.created_at.desc(), AdminActionLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return AdminLogPage(
        logs=[to_admin_log_out(entry) for entry in entries],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )
