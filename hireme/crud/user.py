"""
CRUD operations for User model.
"""

from typing import Optional

from sqlalchemy import Float, cast
from sqlalchemy.orm import Session

from hireme.models.user import User


def get_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def apply_rating(db: Session, user_id: str, rating: int) -> bool:
    """
    Fold one rating into a user's aggregate with a single UPDATE.

    The new sum, count and average are all computed from the row's current
    values, so concurrent updates for the same user serialise on the row
    lock instead of overwriting each other. The count is at least 1 after
    the increment, so the division is always defined.

    Returns:
        False if the user does not exist
    """
    updated = (
        db.query(User)
        .filter(User.id == user_id)
        .update(
            {
                User.rating_sum: User.rating_sum + rating,
                User.rating_count: User.rating_count + 1,
                User.average_rating: cast(User.rating_sum + rating, Float) / (User.rating_count + 1),
            },
            synchronize_session=False,
        )
    )
    return updated == 1
