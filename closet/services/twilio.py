"""
SMS verification through the Twilio Verify REST API
Reference: https://www.twilio.com/docs/verify/api
"""
import logging
import re
from functools import lru_cache
from typing import Optional

import httpx

from closet.api.v1.schemas.auth import PhoneVerificationResponse
from closet.core.config import settings

logger = logging.getLogger(__name__)

TWILIO_VERIFY_BASE_URL = "https://verify.twilio.com/v2/Services"

NOT_CONFIGURED_ERROR = "Twilio n'est pas configuré. Veuillez vérifier vos variables d'environnement."
SEND_FAILED_ERROR = "Impossible d'envoyer le code de vérification. Vérifiez le numéro de téléphone."
INVALID_CODE_ERROR = "Code de vérification invalide."
EXPIRED_CODE_ERROR = "Code de vérification invalide ou expiré."
NETWORK_ERROR = "Erreur réseau. Veuillez réessayer."


@lru_cache()
def get_twilio_service() -> 'TwilioService':
    return TwilioService()


class TwilioService:
    """
    Sends and checks SMS verification codes.

    Failures are returned as PhoneVerificationResponse(success=False, error=...)
    with a French message, never raised.
    """

    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        service_sid: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid or settings.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or settings.TWILIO_AUTH_TOKEN
        self.service_sid = service_sid or settings.TWILIO_VERIFY_SERVICE_SID
        self._transport = transport

    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.service_sid)

    async def _post(self, endpoint: str, data: dict) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=10.0,
            transport=self._transport,
            auth=(self.account_sid, self.auth_token),
        ) as client:
            # Form-encoded body, as the Verify API expects
            return await client.post(f"{TWILIO_VERIFY_BASE_URL}/{self.service_sid}/{endpoint}", data=data)

    async def send_verification_code(self, phone_number: str) -> PhoneVerificationResponse:
        if not self.is_configured():
            return PhoneVerificationResponse(success=False, error=NOT_CONFIGURED_ERROR)

        try:
            logger.info("Sending verification code")
            response = await self._post("Verifications", {"To": phone_number, "Channel": "sms"})
        except httpx.HTTPError as e:
            logger.error(f"Error sending verification code: {type(e).__name__}: {e}")
            return PhoneVerificationResponse(success=False, error=NETWORK_ERROR)

        if response.is_error:
            logger.error(f"Twilio error {response.status_code}: {response.text[:200]}")
            return PhoneVerificationResponse(success=False, error=SEND_FAILED_ERROR)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Unreadable Twilio response {response.status_code}: {response.text[:200]}")
            return PhoneVerificationResponse(success=False, error=SEND_FAILED_ERROR)

        logger.info(f"Verification code sent: {data.get('status') if isinstance(data, dict) else None}")
        return PhoneVerificationResponse(success=True)

    async def verify_code(self, phone_number: str, code: str) -> PhoneVerificationResponse:
        if not self.is_configured():
            return PhoneVerificationResponse(success=False, error=NOT_CONFIGURED_ERROR)

        try:
            response = await self._post("VerificationCheck", {"To": phone_number, "Code": code})
        except httpx.HTTPError as e:
            logger.error(f"Error checking verification code: {type(e).__name__}: {e}")
            return PhoneVerificationResponse(success=False, error=NETWORK_ERROR)

        if response.is_error:
            logger.error(f"Twilio verification error {response.status_code}: {response.text[:200]}")
            return PhoneVerificationResponse(success=False, error=INVALID_CODE_ERROR)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Unreadable Twilio verification response {response.status_code}: {response.text[:200]}")
            return PhoneVerificationResponse(success=False, error=NETWORK_ERROR)

        if isinstance(data, dict) and data.get("status") == "approved" and data.get("valid"):
            logger.info("Verification code approved")
            return PhoneVerificationResponse(success=True)

        return PhoneVerificationResponse(success=False, error=EXPIRED_CODE_ERROR)

    @staticmethod
    def format_phone_number(phone_number: str) -> str:
        """
        Normalize to E.164: keep digits, turn a French leading 0 into 33, prefix +.
        """
        cleaned = re.sub(r"\D", "", phone_number)
        if cleaned.startswith("0"):
            cleaned = "33" + cleaned[1:]
        return "+" + cleaned

    @staticmethod
    def validate_phone_number(phone_number: str) -> bool:
        return len(re.sub(r"\D", "", phone_number)) >= 10
