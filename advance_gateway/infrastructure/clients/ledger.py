"""Ledger webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Optional

import httpx

from advance_gateway.domain.models import LedgerEvent
from advance_gateway.infrastructure.observability.metrics import webhook_latency_histogram, webhook_failure_counter

logger = logging.getLogger(__name__)


class LedgerClient:
    """Client for sending ledger events to an external webhook"""

    def __init__(
        self,
        webhook_url: str,
        max_retries: int = 5,
        backoff_base: float = 1.0,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.timeout = timeout
        self.transport = transport

    async def send_event(self, event: LedgerEvent) -> None:
        """
        Deliver a ledger event with retry logic.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ...
        - Retries on 5xx errors and network failures; 4xx is final
        - Tracks latency histogram and failure counter

        Raises:
            httpx.HTTPError: After the last failed attempt
        """
        payload = event.to_payload()
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if isinstance(e, httpx.HTTPStatusError) and e.response.status_code < 500:
                        logger.error(
                            "Ledger webhook rejected event",
                            extra={"event": event.event, "status_code": e.response.status_code},
                        )
                        raise

                    if attempt >= self.max_retries:
                        # Final failure after all retries
                        logger.error(
                            "Ledger webhook delivery failed",
                            extra={"event": event.event, "attempts": attempt},
                        )
                        raise

                    # Exponential backoff: base, 2*base, 4*base, ...
                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

    async def deliver(self, event: LedgerEvent) -> bool:
        """
        Fire-and-forget delivery for background tasks.

        Runs after the response has been sent, so a failed delivery is
        logged and counted by `send_event` and never re-raised here.

        Returns:
            True if the ledger accepted the event
        """
        try:
            await self.send_event(event)
        except httpx.HTTPError:
            logger.warning(
                "Ledger event dropped",
                extra={"event": event.event, "application_id": event.application_id},
            )
            return False
        return True
