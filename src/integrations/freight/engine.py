"""
Freight engine: one SSW call per inbound payload.

Received -> Normalized -> Validated -> (Rejected | Sent)
         -> (TransportFailed | Extracted) -> (ProtocolFailed | Classified)
         -> (Success | BusinessFailure)

Validation, protocol and business outcomes come back as result objects.
Transport failures are raised as TransportError (with the operation and the
masked request attached) so the caller decides whether to try again; the
engine itself never retries.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import uuid
from typing import Any, Callable, Mapping, Optional

from src.integrations.contracts.freight import CallState, RemoteReply, SoapEnvelope, SoapTransport
from src.integrations.freight.classifier import (
    CollectionResult,
    FreightFailure,
    QuoteResult,
    ResultClassifier,
    diagnostics_for,
    mask_fields,
)
from src.integrations.freight.envelope import SoapEnvelopeBuilder
from src.integrations.freight.errors import TransportError
from src.integrations.freight.extractor import ResponseExtractor
from src.integrations.freight.normalizer import normalize_collection_request, normalize_quote_request
from src.integrations.freight.validation import validate_collection_request, validate_quote_request
from src.utils.config_loader import SswConfig

logger = logging.getLogger(__name__)


class _CallTrace:
    def __init__(self, operation: str):
        self.call_id = uuid.uuid4().hex[:12]
        self.operation = operation
        self.state = CallState.RECEIVED
        logger.debug("[%s] %s %s", self.call_id, operation, self.state.value)

    def advance(self, state: CallState) -> None:
        logger.debug("[%s] %s %s -> %s", self.call_id, self.operation, self.state.value, state.value)
        self.state = state


class FreightEngine:
    def __init__(
        self,
        transport: SoapTransport,
        config: Optional[SswConfig] = None,
        builder: Optional[SoapEnvelopeBuilder] = None,
        extractor: Optional[ResponseExtractor] = None,
        classifier: Optional[ResultClassifier] = None,
    ):
        self.transport = transport
        self.config = config or SswConfig()
        self.builder = builder or SoapEnvelopeBuilder(self.config.namespace)
        self.extractor = extractor or ResponseExtractor(preview_chars=self.config.raw_body_preview_chars)
        self.classifier = classifier or ResultClassifier(self.config.classifier)

    async def quote(self, payload: Optional[Mapping[str, Any]]) -> QuoteResult:
        trace = _CallTrace("cotarSite")
        request = normalize_quote_request(payload, self.config)
        trace.advance(CallState.NORMALIZED)

        violations = validate_quote_request(request)
        if violations:
            trace.advance(CallState.REJECTED)
            logger.info("Quotation rejected before sending: %s", "; ".join(violations))
            return self.classifier.rejected(violations)
        trace.advance(CallState.VALIDATED)

        return await self._exchange(self.builder.quotation(request), self.classifier.classify_quote, trace)

    async def request_collection(self, payload: Optional[Mapping[str, Any]]) -> CollectionResult:
        trace = _CallTrace("coletar")
        request = normalize_collection_request(payload, self.config)
        trace.advance(CallState.NORMALIZED)

        violations = validate_collection_request(request)
        if violations:
            trace.advance(CallState.REJECTED)
            logger.info("Collection request rejected before sending: %s", "; ".join(violations))
            return self.classifier.rejected(violations)
        trace.advance(CallState.VALIDATED)

        return await self._exchange(self.builder.collection(request), self.classifier.classify_collection, trace)

    async def _exchange(
        self,
        envelope: SoapEnvelope,
        classify: Callable[[RemoteReply], Any],
        trace: _CallTrace,
    ):
        trace.advance(CallState.SENT)
        action = self.builder.soap_action(envelope.operation)
        try:
            raw = await asyncio.wait_for(
                self.transport.send(envelope, action),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            trace.advance(CallState.TRANSPORT_FAILED)
            raise TransportError(
                f"SSW did not answer within {self.config.timeout_seconds:g}s",
                operation=envelope.operation,
                masked_request=mask_fields(envelope),
                timed_out=True,
            ) from e
        except TransportError as e:
            trace.advance(CallState.TRANSPORT_FAILED)
            raise e.with_context(envelope.operation, mask_fields(envelope))

        extraction = self.extractor.extract(raw)
        if not extraction.found:
            trace.advance(CallState.PROTOCOL_FAILED)
            return self._with_diagnostics(self.classifier.protocol_failure(extraction), envelope)
        trace.advance(CallState.EXTRACTED)

        reply = self.extractor.to_reply(extraction)
        trace.advance(CallState.CLASSIFIED)
        result = classify(reply)
        trace.advance(result.state)
        if not result.ok:
            logger.info(
                "SSW %s answered erro=%s: %s",
                envelope.operation.value,
                reply.raw_outcome,
                reply.message,
            )
        return self._with_diagnostics(result, envelope)

    def _with_diagnostics(self, result, envelope: SoapEnvelope):
        if self.config.echo_request and isinstance(result, FreightFailure):
            return dataclasses.replace(result, diagnostics=diagnostics_for(envelope, self.builder))
        return result
