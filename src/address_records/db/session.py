"""Database session management."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from address_records.models import Base


class SessionManager:
    """Owns an engine and hands out sessions.

    Used as a context manager it yields a session that is committed on
    success, rolled back on error and always closed.
    """

    def __init__(self, database_url: str, **engine_options: Any):
        """Initialize session manager with database URL."""
        self.engine = create_engine(database_url, **engine_options)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.logger = logging.getLogger(__name__)
        self.session: Session | None = None

    def create_all(self) -> None:
        """Create the address tables (and any other tables on Base) if missing."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session."""
        session = self.SessionLocal()
        self.logger.debug("Created new session: %s", id(session))
        return session

    def __enter__(self) -> Session:
        self.session = self.get_session()
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.session is None:
            raise RuntimeError("SessionManager.__exit__ called without __enter__")
        try:
            if exc_type is None:
                self.logger.debug("Committing session")
                self.session.commit()
            else:
                self.logger.debug("Rolling back session")
                self.session.rollback()
        finally:
            self.session.close()
            self.session = None
