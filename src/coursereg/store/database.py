"""Database connection manager for the registry store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from coursereg.store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine

# Execution option marking a connection whose transaction will write
WRITE_OPTION = "coursereg_write"


class Database:
    """Database connection manager.

    Manages SQLite database connections with WAL mode enabled. On file-backed
    databases a connection carrying the ``WRITE_OPTION`` execution option
    starts its transaction with ``BEGIN IMMEDIATE``, so a check-then-write
    sequence holds the write lock from its first read. Other transactions
    use a plain deferred ``BEGIN`` and never wait on a writer.
    """

    def __init__(self, db_path: str = "coursereg.db") -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for in-memory DB.
        """
        self.db_path = db_path
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def in_memory(self) -> bool:
        """Whether this is a throwaway in-memory database."""
        return self.db_path == ":memory:"

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if not self.in_memory:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            # In-memory databases share one connection across threads (TestClient)
            if self.in_memory:
                self._engine = create_engine(
                    "sqlite:///:memory:",
                    echo=False,
                    poolclass=StaticPool,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    echo=False,
                )

            immediate = not self.in_memory

            @event.listens_for(self._engine, "connect")
            def set_sqlite_pragma(dbapi_connection: object, _connection_record: object) -> None:
                if immediate:
                    # Let SQLAlchemy emit BEGIN itself (see on_begin)
                    dbapi_connection.isolation_level = None  # type: ignore[attr-defined]
                cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

            if immediate:

                @event.listens_for(self._engine, "begin")
                def on_begin(conn: Connection) -> None:
                    if conn.get_execution_options().get(WRITE_OPTION):
                        conn.exec_driver_sql("BEGIN IMMEDIATE")
                    else:
                        conn.exec_driver_sql("BEGIN")

        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_tables(self) -> None:
        """Create all tables if they don't exist."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session.

        Returns:
            A new SQLAlchemy session.
        """
        return self.session_factory()

    @staticmethod
    def begin_write(session: Session) -> None:
        """Begin the session's transaction as a writer.

        Must be called before the session runs any statement. On file
        databases this takes the write lock immediately and may wait up to
        the busy timeout for another writer.
        """
        session.connection(execution_options={WRITE_OPTION: True})

    def is_wal_mode(self) -> bool:
        """Check if WAL mode is enabled.

        Returns:
            True if WAL mode is enabled.
        """
        with self.engine.connect() as conn:
            result = conn.execute(text("PRAGMA journal_mode"))
            mode = result.scalar()
            return mode == "wal"

    def close(self) -> None:
        """Close the database connection."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
