"""SQLModel-backed persistence adapter."""

from .database import bootstrap_database, create_db_engine, create_session_factory, init_database

__all__ = ["bootstrap_database", "create_db_engine", "create_session_factory", "init_database"]
