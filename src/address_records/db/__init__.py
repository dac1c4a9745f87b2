"""Database plumbing."""

from address_records.db.session import SessionManager

__all__ = ["SessionManager"]
