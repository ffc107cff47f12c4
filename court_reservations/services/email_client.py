"""Transactional e-mail API client.

Sends messages through a Resend-compatible HTTP API (``POST /emails`` with
a bearer key). When ``EMAIL_ENABLED`` is false, messages are logged and
dropped so local runs never reach the provider.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from court_reservations.core.config import settings
from court_reservations.core.exceptions import NotificationError

logger = logging.getLogger(__name__)


class EmailClient:
    """Client for the e-mail delivery API."""

    def __init__(self):
        """Initialize the e-mail client."""
        self.enabled = settings.EMAIL_ENABLED
        self.api_base_url = settings.EMAIL_API_BASE_URL.rstrip("/")
        self.api_key = settings.EMAIL_API_KEY
        self.from_address = settings.EMAIL_FROM_ADDRESS
        self.timeout = settings.EMAIL_TIMEOUT_SECONDS
        self.max_retries = settings.EMAIL_MAX_RETRIES

    async def _make_request(
        self,
        method: str,
        url: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            json_data: JSON body data

        Returns:
            Response JSON data

        Raises:
            NotificationError: If the request fails after retries
        """
        headers = {"Authorization": f"Bearer {self.api_key}"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(self.max_retries):
                try:
                    logger.debug(f"Making {method} request to {url} (attempt {attempt + 1}/{self.max_retries})")

                    response = await client.request(
                        method=method,
                        url=url,
                        json=json_data,
                        headers=headers,
                    )
                    response.raise_for_status()

                    return response.json()

                except httpx.HTTPError as e:
                    logger.warning(f"E-mail request failed (attempt {attempt + 1}/{self.max_retries}): {e}")

                    if attempt == self.max_retries - 1:
                        raise NotificationError(f"E-mail delivery failed: {e}") from e

                    # Exponential backoff
                    await asyncio.sleep(2 ** attempt)

        raise NotificationError("Max retries exceeded")

    async def send_email(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        """
        Send one HTML message.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body

        Returns:
            Provider response, or a ``{"skipped": True}`` marker when disabled
        """
        if not self.enabled:
            logger.info(f"E-mail disabled, not sending '{subject}' to {to}")
            return {"id": None, "skipped": True}

        logger.info(f"Sending e-mail '{subject}' to {to}")
        return await self._make_request(
            "POST",
            f"{self.api_base_url}/emails",
            json_data={
                "from": self.from_address,
                "to": [to],
                "subject": subject,
                "html": html,
            },
        )


# Singleton instance
email_client = EmailClient()
