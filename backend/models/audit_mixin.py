from sqlalchemy import Column, DateTime, Index, String, text
from datetime import datetime
import pytz

IST = pytz.timezone('Asia/Kolkata')


def now_ist() -> datetime:
    return datetime.now(IST)


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Used on its own for configuration rows that can be removed
    and recreated without leaving history behind (config entries keyed by name).
    """
    # Timezone-aware timestamps so every record is stamped in Asia/Kolkata.
    created_at = Column(DateTime(timezone=True), default=now_ist)
    updated_at = Column(DateTime(timezone=True), onupdate=now_ist)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)


class SoftDeleteMixin:
    """Mixin for soft-delete columns (deleted_at, deleted_by).

    Financial documents (LRs, invoices, hiring and booking registers) keep
    their rows after deletion; the session filter in ``database`` hides them.
    """
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String, nullable=True)


class AuditMixin(TimestampMixin, SoftDeleteMixin):
    """Timestamps + soft-delete, the default for transactional records."""
    pass


def unique_while_live(name: str, *columns: str) -> Index:
    """Unique index over rows that are not soft-deleted, so a deleted row frees its key."""
    return Index(
        name, *columns, unique=True,
        postgresql_where=text("deleted_at IS NULL"),
        sqlite_where=text("deleted_at IS NULL"),
    )
