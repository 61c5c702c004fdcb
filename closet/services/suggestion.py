"""
Client for the remote AI functions (clothing tagging and outfit suggestion)
Each call is a single JSON POST/response.
Reference: https://www.python-httpx.org/async/
"""
import logging
from functools import lru_cache
from typing import Optional

import httpx
from pydantic import ValidationError

from closet.api.v1.schemas.clothing import TagClothesResponse
from closet.api.v1.schemas.outfit import SuggestOutfitRequest, SuggestOutfitResponse
from closet.core.config import settings
from closet.core.exceptions import SuggestionServiceException

logger = logging.getLogger(__name__)


@lru_cache()
def get_suggestion_client() -> 'SuggestionClient':
    """Get a singleton SuggestionClient instance."""
    return SuggestionClient()


class SuggestionClient:
    """Posts wardrobe data to the AI cloud functions"""

    def __init__(
        self,
        tag_clothes_url: Optional[str] = None,
        suggest_outfit_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tag_clothes_url = tag_clothes_url or settings.CLOUD_FUNCTION_TAG_CLOTHES
        self.suggest_outfit_url = suggest_outfit_url or settings.CLOUD_FUNCTION_SUGGEST_OUTFIT
        self.timeout = timeout or settings.CLOUD_FUNCTION_TIMEOUT
        self._transport = transport

    async def _post(self, url: Optional[str], payload: dict, operation: str) -> dict:
        if not url:
            logger.error(f"Cannot call {operation}: cloud function URL is not configured")
            raise SuggestionServiceException(f"{operation} endpoint is not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Error calling {operation}: {type(e).__name__}: {e}", exc_info=True)
            raise SuggestionServiceException(f"{operation} request failed: {e}") from e

        if response.is_error:
            logger.error(f"Error calling {operation}: HTTP {response.status_code} {response.text[:200]}")
            raise SuggestionServiceException(
                f"API Error: {response.status_code}", status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{operation} returned a non-JSON body", exc_info=True)
            raise SuggestionServiceException(f"{operation} returned an invalid response") from e

    async def tag_clothes(self, image_url: str) -> TagClothesResponse:
        """
        Ask the tagging function to describe a clothing photo.

        Returns:
            Detected type/color/tags with an optional confidence

        Raises:
            SuggestionServiceException: On missing configuration, transport or HTTP errors
        """
        data = await self._post(self.tag_clothes_url, {"image_url": image_url}, "tag_clothes")
        try:
            return TagClothesResponse.model_validate(data)
        except ValidationError as e:
            logger.error("tag_clothes payload schema validation failed", exc_info=True)
            raise SuggestionServiceException("tag_clothes returned an invalid response") from e

    async def suggest_outfit(self, request: SuggestOutfitRequest) -> SuggestOutfitResponse:
        """
        Ask the suggestion function to pick an outfit from the serialized wardrobe.

        Raises:
            SuggestionServiceException: On missing configuration, transport or HTTP errors
        """
        data = await self._post(
            self.suggest_outfit_url,
            request.model_dump(exclude_none=True),
            "suggest_outfit",
        )
        try:
            return SuggestOutfitResponse.model_validate(data)
        except ValidationError as e:
            logger.error("suggest_outfit payload schema validation failed", exc_info=True)
            raise SuggestionServiceException("suggest_outfit returned an invalid response") from e
