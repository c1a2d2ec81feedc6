from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from hireme.core.database import Base
from hireme.models.base import SoftDeleteMixin, TimestampMixin


class Feedback(SoftDeleteMixin, TimestampMixin, Base):
    """
    A rating one party of a job connection leaves about the other.

    Hidden until the connection's completion worker runs; flipping is_visible
    and folding the rating into the recipient's aggregate happen together,
    so is_visible also marks the rating as counted.
    """
    __tablename__ = "feedbacks"
    __table_args__ = (
        UniqueConstraint("job_connection_id", "from_user_id", name="ux_feedbacks_connection_from_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedbacks_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    rating = Column(Integer, nullable=False)  # 1-5 stars
    message = Column(String(500), nullable=True)
    is_visible = Column(Boolean, default=False, server_default="false", nullable=False, index=True)

    job_connection_id = Column(Integer, ForeignKey("job_connections.id"), nullable=False, index=True)
    from_user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    to_user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    job_connection = relationship("JobConnection")
    from_user = relationship("User", foreign_keys=[from_user_id])
    to_user = relationship("User", foreign_keys=[to_user_id])

    def __repr__(self):
        return f"<Feedback(id={self.id}, job_connection_id={self.job_connection_id}, rating={self.rating}, visible={self.is_visible})>"
