"""
User model.

Credentials and roles are owned by the identity provider; this table holds
what the marketplace needs: who the user is and their rating aggregate.
"""

import uuid

from sqlalchemy import Boolean, Column, Float, Integer, String

from hireme.core.database import Base
from hireme.models.base import TimestampMixin


class User(TimestampMixin, Base):
    """
    A marketplace participant, worker or employer.

    rating_sum / rating_count / average_rating form a projection over the
    visible feedback the user has received. Only the job-connection
    completion worker writes them.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Rating aggregate
    rating_sum = Column(Integer, default=0, server_default="0", nullable=False)
    rating_count = Column(Integer, default=0, server_default="0", nullable=False)
    average_rating = Column(Float, default=0.0, server_default="0", nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', average_rating={self.average_rating})>"
