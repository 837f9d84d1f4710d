"""
Nexio Backend — Shared Column Helpers
======================================

What:  Column factories shared by every table (primary key, created_at).
How:   Each helper returns a fresh `mapped_column`; declarative classes call
       them in their bodies.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import mapped_column


def new_id() -> str:
    """Opaque identifier used as the primary key of every row."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def id_column():
    # VARCHAR(36) rather than a native UUID type: ids are opaque strings to
    # clients and the same column works on PostgreSQL and SQLite
    return mapped_column(String(36), primary_key=True, default=new_id)


def created_at_column():
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
