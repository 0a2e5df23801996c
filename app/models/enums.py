"""
Database Enums

Python Enums for closed value sets stored in the database.
"""

import enum


class AccountType(str, enum.Enum):
    """Account category enumeration."""
    PERSONAL = "personal"
    CHILDREN = "children"
    BUSINESS = "business"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]
