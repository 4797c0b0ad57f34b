"""Remote promo validator client — calls an external apply-promo-code endpoint."""

import logging

import httpx

from royalstay.config import settings
from royalstay.services.pricing.promo_gate import PromoValidationResult

logger = logging.getLogger(__name__)


class PromoValidatorClient:
    """Adapter for a hosted promo validation function.

    Request body: {promo_code, customer_id, device_id, total_amount}
    Response body: {valid, final_amount?, message?}
    """

    def __init__(self, base_url: str | None = None, api_key: str | None = None):
        self._client: httpx.AsyncClient | None = None
        self._base_url = base_url if base_url is not None else settings.promo_validator_url
        self._api_key = api_key if api_key is not None else settings.promo_validator_key

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.promo_validator_timeout)
        return self._client

    async def validate(
        self, code: str, amount: float, customer_id: str, device_id: str
    ) -> PromoValidationResult:
        if not self._base_url:
            return PromoValidationResult(valid=False, message="Promo validation is not configured")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            client = await self._get_client()
            resp = await client.post(
                self._base_url,
                json={
                    "promo_code": code,
                    "customer_id": customer_id,
                    "device_id": device_id,
                    "total_amount": amount,
                },
                headers=headers,
            )
            resp.raise_for_status()
            result = PromoValidationResult.from_payload(resp.json())
        except httpx.HTTPStatusError as e:
            logger.error(f"Promo validator returned {e.response.status_code} for {code}")
            return PromoValidationResult(valid=False, message="Failed to validate promo code.")
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Promo validator request failed for {code}: {e}")
            return PromoValidationResult(
                valid=False,
                message="An unexpected error occurred while validating the promo code.",
            )

        if not result.valid and not result.message:
            result.message = "Promo code is not valid or could not be applied."
        return result

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


promo_validator_client = PromoValidatorClient()
