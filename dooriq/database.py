from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from dooriq.settings import settings

Base = declarative_base()

# SQLite connections are shared across the request threadpool
connect_args = (
    {"check_same_thread": False} if settings.DB_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DB_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    """Create any missing tables."""
    # Models must be imported so they register on Base.metadata
    from dooriq.models import session  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# Dependency to get a DB session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
