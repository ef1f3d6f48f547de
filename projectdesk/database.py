"""
Database Configuration and Session Management

The engine and session factory live on a Database object that the
application factory creates and stores on app.state. Request handlers
get a session through the get_db dependency, which looks the handle up
on the running application rather than in a module global.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from starlette.requests import Request
from typing import Iterator
import logging

from projectdesk.config import Settings
from projectdesk.core.exceptions import integrity_error

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


class Database:
    """Owns the engine (and its connection pool) plus the session factory."""

    def __init__(self, settings: Settings):
        self.url = settings.DATABASE_URL
        self.engine = self._create_engine(settings)

        # expire_on_commit=False so response serialisation after commit
        # does not trigger another round-trip per attribute.
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )

        event.listen(self.engine, "connect", self._on_connect)

    def _create_engine(self, settings: Settings):
        if self.url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases only exist for the life of one connection
            if ":memory:" in self.url or self.url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
            return create_engine(self.url, echo=settings.DEBUG, **kwargs)

        return create_engine(
            self.url,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_pre_ping=True,  # handles stale connections
            echo=settings.DEBUG,
        )

    def _on_connect(self, dbapi_connection, connection_record):
        """Set connection-level configuration on new connections."""
        cursor = dbapi_connection.cursor()
        if self.url.startswith("postgresql"):
            cursor.execute("SET TIME ZONE 'UTC'")
        elif self.url.startswith("sqlite"):
            # SQLite ignores foreign keys unless asked per connection
            cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("New database connection established")

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        """
        Create all tables.

        Meant for development and tests. Production schemas should be
        managed by migrations.
        """
        # Import models so they register on Base.metadata
        import projectdesk.models  # noqa: F401

        logger.info("Creating database tables")
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    The session is closed after the request completes. Tenant scoping
    is applied by the controllers, not here.
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session) -> None:
    """
    Commit the session, translating constraint violations.

    Unique violations become ConflictError, NOT NULL and foreign key
    violations become ValidationError. The session is rolled back first.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info(f"Integrity error on commit: {exc.orig}")
        raise integrity_error(exc) from exc
