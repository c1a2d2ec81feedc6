"""
Column mixins shared by the marketplace tables.
"""

from sqlalchemy import Boolean, Column, DateTime, func


class TimestampMixin:
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class SoftDeleteMixin:
    """
    Rows are never physically deleted, only flagged.

    Flagged rows are filtered out of every ORM query by the session hook in
    hireme.core.database.
    """
    is_deleted = Column(Boolean, default=False, server_default="false", nullable=False, index=True)
