"""
Real SSW SOAP HTTP Client.

Purpose:
- Posts rendered `cotarSite` / `coletar` envelopes to the SSW web service
- Returns the raw reply text; decoding is the freight extractor's job

Implementation notes:
- Uses httpx for async requests with a fixed timeout
- SOAP faults arrive as HTTP 500 with a body, so 500 is handed back as a reply
- Network errors, timeouts and any other non-2xx status become TransportError

Important:
- Keep this client as the ONLY place where SSW HTTP calls are made.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx

from src.integrations.contracts.freight import SoapEnvelope, SoapTransport
from src.integrations.freight.errors import TransportError
from src.utils.config_loader import DEFAULT_ENDPOINT

logger = logging.getLogger(__name__)

_SOAP_FAULT_STATUS = 500


class SswSoapClient(SoapTransport):
    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout_seconds: float = 30.0,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint or os.getenv("SSW_ENDPOINT", DEFAULT_ENDPOINT)
        self.timeout_seconds = timeout_seconds
        self._http_transport = http_transport

    async def send(self, envelope: SoapEnvelope, soap_action: str) -> str:
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": soap_action,
        }
        logger.info("Sending SSW %s request to %s", envelope.operation.value, self.endpoint)

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._http_transport) as client:
                response = await client.post(self.endpoint, content=envelope.body.encode("utf-8"), headers=headers)
        except httpx.TimeoutException as e:
            logger.error("SSW %s timed out after %ss", envelope.operation.value, self.timeout_seconds)
            raise TransportError(
                f"SSW did not answer within {self.timeout_seconds:g}s", timed_out=True
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error connecting to SSW: {e}")
            raise TransportError(f"Request error connecting to SSW: {e}") from e

        logger.info("Received SSW reply: status=%s bytes=%d", response.status_code, len(response.content))
        if response.is_success or response.status_code == _SOAP_FAULT_STATUS:
            return response.text

        raise TransportError(f"SSW answered HTTP {response.status_code}")
