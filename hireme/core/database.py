from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker, with_loader_criteria

from hireme.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=10,
    max_overflow=20
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Session, "do_orm_execute")
def _exclude_soft_deleted(execute_state):
    """
    Hide soft-deleted rows from every ORM SELECT.

    Pass execution_options(include_deleted=True) to see them anyway.
    """
    from hireme.models.base import SoftDeleteMixin

    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get("include_deleted", False)
    ):
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeleteMixin,
                lambda cls: cls.is_deleted.is_(False),
                include_aliases=True,
            )
        )


def get_db():
    """
    Yield a database session and always close it.

    Meant for dependency-injection style callers (an API layer, scripts).
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
