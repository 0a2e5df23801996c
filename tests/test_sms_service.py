"""
SMS Service Unit Tests
"""

import logging

import pytest

from app.services.sms_service import SmsService


@pytest.mark.asyncio
async def test_development_logs_code(caplog):
    caplog.set_level(logging.INFO, logger="app.services.sms_service")

    await SmsService("development").send_otp("09121234567", "04217")

    assert "phone=09121234567 code=04217" in caplog.text


@pytest.mark.asyncio
async def test_production_never_logs_code(caplog):
    caplog.set_level(logging.INFO, logger="app.services.sms_service")

    await SmsService("production").send_otp("09121234567", "04217")

    assert "09121234567" in caplog.text
    assert "04217" not in caplog.text
