"""
SMS Service

Delivers OTP codes to phone numbers.
"""

import logging


logger = logging.getLogger(__name__)


class SmsService:
    """
    Hands OTP codes to the user.

    Outside production the code is written to the application log so it
    can be read during development and testing. In production no SMS
    provider is wired in yet; the send is recorded without the code.
    """

    def __init__(self, environment: str = "development"):
        self._environment = environment

    @property
    def is_production(self) -> bool:
        return self._environment == "production"

    async def send_otp(self, phone: str, code: str) -> None:
        if not self.is_production:
            logger.info(f"[OTP] phone={phone} code={code}")
            return

        # TODO: dispatch through an SMS provider once one is contracted.
        logger.info(f"[OTP] sent to phone={phone}")
