"""
Radif Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from app.core.database import Base

# Enums
from app.models.enums import AccountType

# Models
from app.models.user import User
from app.models.otp_code import OTPCode

__all__ = [
    # Base
    "Base",
    # Enums
    "AccountType",
    # Models
    "User",
    "OTPCode",
]
