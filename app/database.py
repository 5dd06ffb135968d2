# app/database.py
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Database connection
#
# - Postgres in deployment, SQLite for local runs.
# - sslmode=require is appended only when DB_REQUIRE_SSL is set
#   (hosted Postgres behind a pooler).
# - pool_pre_ping=True: validate connections before using them
# ---------------------------------------------------------

db_url = settings.DATABASE_URL
is_sqlite = db_url.startswith("sqlite")

# Append sslmode=require if it is not already present
if settings.DB_REQUIRE_SSL and not is_sqlite and "sslmode=" not in db_url:
    if "?" in db_url:
        db_url = db_url + "&sslmode=require"
    else:
        db_url = db_url + "?sslmode=require"

connect_args = {"check_same_thread": False} if is_sqlite else {}

engine = create_engine(
    db_url,
    echo=settings.DB_ECHO,
    pool_pre_ping=True,
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
