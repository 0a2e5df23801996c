"""
Radif Backend - Services Module

Business logic layer.
"""

from app.services import otp_service
from app.services import user_service
from app.services import avatar_service

__all__ = [
    "otp_service",
    "user_service",
    "avatar_service",
]
