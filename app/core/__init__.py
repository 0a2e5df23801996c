"""
Radif Backend - Core Module

This module contains configuration, database setup, errors and security utilities.
"""

from app.core.config import get_settings, settings
from app.core.database import Base, create_engine, create_session_maker, get_db

__all__ = ["settings", "get_settings", "Base", "get_db", "create_engine", "create_session_maker"]
