"""Generate database sessions"""

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from src.db.schema import Base


def build_engine(database_url: str) -> Engine:
    """SQLite needs to share one connection across threads (and across sessions for an in-memory db)."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url)


def build_session_factory(engine: Engine) -> scoped_session:
    """One session per thread: routes run in a threadpool, and events are delivered on the mover's thread."""
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return scoped_session(sessionmaker(autoflush=False, bind=engine))
