"""
Input Validators

Format rules shared by request schemas and query-parameter handlers.
Each validator returns the value unchanged or raises ValueError with a
message suitable for API clients.
"""

import re


PHONE_REGEX = re.compile(r"09[0-9]{9}")
OTP_CODE_REGEX = re.compile(r"[0-9]{5}")
USERNAME_REGEX = re.compile(r"[a-zA-Z0-9_]+")

USERNAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 160


def validate_phone(phone: str) -> str:
    """Accept national mobile numbers only: 11 digits starting with 09."""
    if not PHONE_REGEX.fullmatch(phone):
        raise ValueError("invalid phone number format")
    return phone


def validate_otp_code(code: str) -> str:
    if not OTP_CODE_REGEX.fullmatch(code):
        raise ValueError("OTP code must be exactly 5 digits")
    return code


def validate_username(username: str) -> str:
    if not username:
        raise ValueError("username must not be empty")
    if not USERNAME_REGEX.fullmatch(username):
        raise ValueError("username may only contain letters, digits, and underscores")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValueError(f"username must be {USERNAME_MAX_LENGTH} characters or fewer")
    return username


def validate_bio(bio: str) -> str:
    if len(bio) > BIO_MAX_LENGTH:
        raise ValueError(f"bio must be {BIO_MAX_LENGTH} characters or fewer")
    return bio
