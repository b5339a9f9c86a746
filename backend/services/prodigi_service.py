"""
Prodigi Service — asset upload and order submission.

Prodigi is the print-on-demand provider. Two endpoints are used:
  - POST <asset host>   {"file": <base64 image>} → {"id": <asset id>}
  - POST /Orders        order payload → {"outcome": ..., "order": {"id": ...}}

Every call carries an explicit timeout. Nothing here retries; callers decide
what a failure means.
"""
import logging
from typing import Any, Optional

import httpx

from config import Settings
from exceptions import AssetUploadError, FulfillmentAPIError

logger = logging.getLogger(__name__)


def _extract_id(result: Any, nested_key: str) -> Optional[str]:
    """Prodigi answers with a top-level id or nests it under a resource key."""
    if not isinstance(result, dict):
        return None
    if result.get("id"):
        return str(result["id"])
    nested = result.get(nested_key)
    if isinstance(nested, dict) and nested.get("id"):
        return str(nested["id"])
    return None


def _parse_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"status_code": response.status_code, "body": response.text}


class ProdigiClient:
    """Async client for the Prodigi REST API (and the asset host)."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.prodigi.com/v4.0",
        asset_host_url: Optional[str] = None,
        asset_host_api_key: Optional[str] = None,
        timeout: float = 30.0,
        upload_timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.asset_host_url = asset_host_url or f"{self.api_url}/assets"
        self.asset_host_api_key = asset_host_api_key or api_key
        self.timeout = timeout
        self.upload_timeout = upload_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProdigiClient":
        return cls(
            api_key=settings.prodigi_api_key,
            api_url=settings.prodigi_api_url,
            asset_host_url=settings.resolved_asset_host_url,
            asset_host_api_key=settings.resolved_asset_host_api_key,
            timeout=settings.http_timeout_seconds,
            upload_timeout=settings.asset_upload_timeout_seconds,
        )

    @staticmethod
    def _headers(api_key: str) -> dict:
        if not api_key:
            raise ValueError("Prodigi API key must be set in .env (PRODIGI_API_KEY)")
        return {
            "X-API-Key": api_key,
            "Content-Type": "application/json",
        }

    async def upload_asset(self, image_data: str) -> str:
        """
        Upload a base64 image to the asset host.

        Args:
            image_data: Base64 payload (optionally a data: URL) as sent by the client

        Returns:
            The asset id to reference in an order

        Raises:
            AssetUploadError: transport failure or a response without an id
        """
        try:
            headers = self._headers(self.asset_host_api_key)
        except ValueError as e:
            raise AssetUploadError(str(e))

        try:
            async with httpx.AsyncClient(timeout=self.upload_timeout) as client:
                response = await client.post(
                    self.asset_host_url,
                    headers=headers,
                    json={"file": image_data},
                )
        except httpx.HTTPError as e:
            logger.error(f"Asset upload request failed: {e}")
            raise AssetUploadError(f"Asset host unreachable: {e}")

        result = _parse_body(response)
        asset_id = _extract_id(result, "asset")
        if not asset_id:
            logger.error(f"Failed to upload to Prodigi: {result}")
            raise AssetUploadError(
                "Asset host returned no asset id",
                payload=result,
                status_code=response.status_code,
            )

        logger.info(f"Prodigi asset uploaded: {asset_id} ({len(image_data)} chars)")
        return asset_id

    async def create_order(self, order: dict) -> str:
        """
        Submit an order to Prodigi.

        Returns:
            The Prodigi order id

        Raises:
            FulfillmentAPIError: transport failure or a response without an id
                (the full response payload is attached)
        """
        try:
            headers = self._headers(self.api_key)
        except ValueError as e:
            raise FulfillmentAPIError(str(e))

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_url}/Orders",
                    headers=headers,
                    json=order,
                )
        except httpx.HTTPError as e:
            raise FulfillmentAPIError(f"Prodigi unreachable: {e}")

        result = _parse_body(response)
        order_id = _extract_id(result, "order")
        if not order_id:
            raise FulfillmentAPIError(
                "Prodigi order was not created",
                payload=result,
                status_code=response.status_code,
            )
        return order_id
