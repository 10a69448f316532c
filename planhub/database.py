import logging
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./planhub.db")

_CONNECT_ARGS = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=_CONNECT_ARGS)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Columns added after the first release; older databases get them on startup.
_PROJECT_COLUMN_SPECS = {
    "description": "TEXT",
    "is_public": "BOOLEAN DEFAULT 0",
    "parent_project_id": "INTEGER",
}

_USER_COLUMN_SPECS = {
    "user_type": "VARCHAR(16) DEFAULT 'user'",
    "is_admin": "BOOLEAN DEFAULT 0",
}

_VERSION_COLUMN_SPECS = {
    "sharing": "VARCHAR(16) DEFAULT 'none'",
    "effective_date": "VARCHAR(10)",
}


def _run_schema_statement(connection, sql: str) -> None:
    try:
        connection.execute(text(sql))
    except Exception as exc:  # noqa: BLE001
        logger.warning("schema statement skipped: %s | sql=%s", exc, sql)


def _add_missing_columns(connection, inspector, table_name: str, column_specs: dict[str, str]) -> None:
    existing_columns = {column["name"] for column in inspector.get_columns(table_name)}
    for column_name, column_spec in column_specs.items():
        if column_name in existing_columns:
            continue
        _run_schema_statement(
            connection,
            f"ALTER TABLE {table_name} ADD COLUMN {column_name} {column_spec}",
        )


def ensure_runtime_schema(bind=None) -> None:
    """Keep table/column compatibility without Alembic migrations."""
    from . import models  # noqa: F401  registers the mappers on Base

    bind = bind if bind is not None else engine
    Base.metadata.create_all(bind=bind)

    with bind.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())

        if "projects" in table_names:
            _add_missing_columns(connection, inspector, "projects", _PROJECT_COLUMN_SPECS)
            _run_schema_statement(
                connection,
                "CREATE INDEX IF NOT EXISTS idx_projects_parent_project_id ON projects (parent_project_id)",
            )

        if "users" in table_names:
            _add_missing_columns(connection, inspector, "users", _USER_COLUMN_SPECS)
            # Legacy rows predate account kinds.
            _run_schema_statement(
                connection,
                "UPDATE users SET user_type='user' WHERE user_type IS NULL",
            )

        if "versions" in table_names:
            _add_missing_columns(connection, inspector, "versions", _VERSION_COLUMN_SPECS)
            _run_schema_statement(
                connection,
                "UPDATE versions SET sharing='none' WHERE sharing IS NULL",
            )


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
