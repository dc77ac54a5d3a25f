from __future__ import annotations

import json
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.models.system_logs import SystemLog
from app.utils.time import utc_now


logger = logging.getLogger("system")
LEVEL_MAP = logging.getLevelNamesMapping()


def record_log(
    db: Session,
    level: str,
    component: str,
    message: str,
    meta: Dict[str, Any] | None = None,
    *,
    user_id: str | None = None,
    commit: bool = True,
) -> SystemLog:
    """Log through the ``system`` logger and persist the entry as a ``SystemLog`` row.

    With ``commit=False`` the row joins the caller's pending transaction, so an
    audit entry is only written together with the change it describes.
    """

    log_level = LEVEL_MAP.get(level.upper(), logging.INFO)
    meta_json = json.dumps(meta, ensure_ascii=False, sort_keys=True, default=str) if meta else None

    if meta_json:
        logger.log(log_level, "%s | %s | meta=%s", component, message, meta_json)
    else:
        logger.log(log_level, "%s | %s", component, message)

    log = SystemLog(
        ts=utc_now(),
        level=level.upper(),
        component=component,
        user_id=user_id,
        message=message[:255],
        meta_json=meta_json,
    )
    db.add(log)
    if commit:
        db.commit()
    return log
