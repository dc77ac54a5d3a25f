from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text

from .base import Base


class SystemLog(Base):
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True)
    ts = Column(DateTime(timezone=True), nullable=False, index=True)
    level = Column(String(16), nullable=False)
    component = Column(String(64), nullable=False)
    user_id = Column(String(36), nullable=True, index=True)
    message = Column(String(255), nullable=False)
    meta_json = Column(Text, nullable=True)
