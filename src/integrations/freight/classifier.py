"""Turns decoded SSW replies into the results handed back to callers.

Also owns the diagnostic echo of the request that was sent: secrets are
masked here, at the boundary, never in the envelope itself.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Union

from src.integrations.contracts.freight import CallState, RemoteReply, SoapEnvelope
from src.integrations.freight.envelope import SECRET_FIELDS, SoapEnvelopeBuilder
from src.integrations.freight.errors import (
    AuthorizationError,
    BusinessError,
    FreightError,
    ProtocolError,
    RequestValidationError,
)
from src.integrations.freight.extractor import Extraction
from src.utils.config_loader import ClassifierConfig

MASK = "***"
DEFAULT_SUCCESS_MESSAGE = "OK"


@dataclass(frozen=True)
class QuoteSuccess:
    freight_value: Optional[float]
    deadline_days: Optional[int]
    quotation_number: str
    token: str
    message: str

    ok: ClassVar[bool] = True
    state: ClassVar[CallState] = CallState.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "freightValue": self.freight_value,
            "deadlineDays": self.deadline_days,
            "quotationNumber": self.quotation_number,
            "token": self.token,
            "message": self.message,
        }


@dataclass(frozen=True)
class CollectionSuccess:
    message: str
    protocol: str = ""

    ok: ClassVar[bool] = True
    state: ClassVar[CallState] = CallState.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "message": self.message, "protocol": self.protocol}


@dataclass(frozen=True)
class FreightFailure:
    """A terminal non-success outcome recovered inside the engine."""

    error: FreightError
    state: CallState
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    ok: ClassVar[bool] = False

    def to_dict(self) -> Dict[str, Any]:
        payload = self.error.to_dict()
        payload.update(self.diagnostics)
        return payload


QuoteResult = Union[QuoteSuccess, FreightFailure]
CollectionResult = Union[CollectionSuccess, FreightFailure]


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def mask_fields(envelope: SoapEnvelope) -> Dict[str, str]:
    return {name: (MASK if name in SECRET_FIELDS else value) for name, value in envelope.fields}


def diagnostics_for(envelope: SoapEnvelope, builder: SoapEnvelopeBuilder) -> Dict[str, Any]:
    masked = mask_fields(envelope)
    return {
        "sentArgs": masked,
        "lastRequest": builder.render(envelope.operation, masked.items()).body,
    }


class ResultClassifier:
    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    def is_success(self, reply: RemoteReply) -> bool:
        raw = reply.raw_outcome.strip()
        if not raw:
            return True
        if reply.outcome_code is not None:
            return reply.outcome_code == self.config.success_code
        return raw.upper() == "OK"

    def is_authorization_failure(self, reply: RemoteReply) -> bool:
        if reply.outcome_code is not None and reply.outcome_code in self.config.auth_error_codes:
            return True
        message = reply.message.casefold()
        return any(keyword.casefold() in message for keyword in self.config.auth_error_keywords)

    def business_error(self, reply: RemoteReply) -> BusinessError:
        error_type = AuthorizationError if self.is_authorization_failure(reply) else BusinessError
        return error_type(reply.outcome_code, reply.message, raw_outcome=reply.raw_outcome)

    def classify_quote(self, reply: RemoteReply) -> QuoteResult:
        if not self.is_success(reply):
            return FreightFailure(self.business_error(reply), CallState.BUSINESS_FAILURE)
        return QuoteSuccess(
            freight_value=_as_float(reply.freight_value),
            deadline_days=reply.deadline_days,
            quotation_number=reply.quotation_number,
            token=reply.token,
            message=reply.message or DEFAULT_SUCCESS_MESSAGE,
        )

    def classify_collection(self, reply: RemoteReply) -> CollectionResult:
        if not self.is_success(reply):
            return FreightFailure(self.business_error(reply), CallState.BUSINESS_FAILURE)
        return CollectionSuccess(
            message=reply.message or DEFAULT_SUCCESS_MESSAGE,
            protocol=reply.protocol,
        )

    @staticmethod
    def protocol_failure(extraction: Extraction) -> FreightFailure:
        error = ProtocolError(
            "SSW reply carried no result payload",
            raw_body_prefix=extraction.raw_body_prefix,
        )
        return FreightFailure(error, CallState.PROTOCOL_FAILED)

    @staticmethod
    def rejected(violations) -> FreightFailure:
        return FreightFailure(RequestValidationError(list(violations)), CallState.REJECTED)
