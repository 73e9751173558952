"""
Database connection and session management for Zoovie Social
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from zoovie_social.core.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES and ON DELETE unless switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; pooling options only apply to server databases"""
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=echo,
        )
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine
    return create_engine(
        database_url,
        pool_pre_ping=True,      # Test connections before using
        pool_size=10,            # Connection pool size
        max_overflow=20,         # Overflow connections allowed
        echo=echo
    )


# Create database engine with connection pooling
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Session factory for creating database sessions; objects keep their state after commit
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session in endpoints

    Usage in FastAPI endpoints:
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Initialize database tables"""
    # Models must be registered on Base before create_all
    import zoovie_social.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
