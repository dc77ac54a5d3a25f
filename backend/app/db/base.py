from __future__ import annotations

# Import all models so that Base.metadata knows every table.
from app.models.base import Base  # noqa: F401
from app.models.system_logs import SystemLog  # noqa: F401
from app.models.trades import Trade  # noqa: F401
from app.models.users import User  # noqa: F401
