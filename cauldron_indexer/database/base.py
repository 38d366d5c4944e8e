# cauldron_indexer/database/base.py

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base


ModelBase = declarative_base()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Row bookkeeping only; entity state never reads these"""
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now(),
                        onupdate=utc_now)
