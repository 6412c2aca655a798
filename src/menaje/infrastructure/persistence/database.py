"""SQLAlchemy engine and session setup.

SQLite has no row locks, so on SQLite every transaction starts with
``BEGIN IMMEDIATE``: it takes the database write lock up front, and a
second writer waits (up to ``SQLITE_BUSY_TIMEOUT`` seconds) until the
first commits.  PostgreSQL keeps its default isolation; the repositories
lock the rows they check with ``SELECT ... FOR UPDATE``.
"""

from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

SQLITE_BUSY_TIMEOUT = 15


class Base(DeclarativeBase):
    pass


def build_engine(database_url: str, echo: bool = False) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    if url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT, "check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy, not pysqlite, decide when transactions begin
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    # Importing the models registers them on Base.metadata
    from menaje.infrastructure.persistence import orm  # noqa: F401

    Base.metadata.create_all(engine)
