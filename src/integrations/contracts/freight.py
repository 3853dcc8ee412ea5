"""
Freight contracts.

Defines the request/response shapes exchanged with the SSW freight service
(`sswCotacaoColeta`), e.g.:
- the canonical quotation request sent through `cotarSite`
- the collection request sent through `coletar`
- the decoded reply read back from either operation

Both clients/mocks/ssw.py and clients/real_http/ssw.py work on the envelopes
built from these contracts, and the freight engine only ever hands these
objects between its stages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PaymentResponsibility(str, Enum):
    PAYER = "payer"
    RECIPIENT = "recipient"

    @property
    def wire_value(self) -> str:
        # SSW "ciffob": C = freight paid at origin, F = paid at destination
        return "C" if self is PaymentResponsibility.PAYER else "F"


class SoapOperation(str, Enum):
    QUOTATION = "cotarSite"
    COLLECTION = "coletar"


class CallState(str, Enum):
    RECEIVED = "Received"
    NORMALIZED = "Normalized"
    VALIDATED = "Validated"
    REJECTED = "Rejected"
    SENT = "Sent"
    TRANSPORT_FAILED = "TransportFailed"
    EXTRACTED = "Extracted"
    PROTOCOL_FAILED = "ProtocolFailed"
    CLASSIFIED = "Classified"
    SUCCESS = "Success"
    BUSINESS_FAILURE = "BusinessFailure"


TERMINAL_STATES = frozenset({
    CallState.REJECTED,
    CallState.TRANSPORT_FAILED,
    CallState.PROTOCOL_FAILED,
    CallState.SUCCESS,
    CallState.BUSINESS_FAILURE,
})


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Credentials:
    """Opaque SSW account credentials. Only the envelope builder reads them."""

    domain: str
    login: str
    password: str = field(repr=False)
    payer_password: str = field(default="", repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.domain and self.login and self.password)


@dataclass(frozen=True)
class QuotationExtras:
    """cotarSite fields the service accepts but this bridge never interprets."""

    trt: str = ""
    difficult_delivery: str = ""
    recipient_taxpayer: str = ""
    pair_count: str = ""
    multiplier_factor: str = ""


@dataclass(frozen=True)
class CanonicalRequest:
    credentials: Credentials
    payer_document: str
    origin_postal_code: str
    destination_postal_code: str
    merchandise_value: Decimal
    weight: Decimal
    volume: Decimal
    payment_responsibility: PaymentResponsibility
    quantity: int = 1
    height: Optional[Decimal] = None
    width: Optional[Decimal] = None
    length: Optional[Decimal] = None
    sender_document: str = ""
    recipient_document: str = ""
    collection_requested: bool = False
    note: str = ""
    merchandise_type_code: int = 1
    extras: QuotationExtras = field(default_factory=QuotationExtras)


@dataclass(frozen=True)
class CollectionRequest:
    credentials: Credentials
    quotation_number: str
    token: str = field(repr=False)
    requester: str
    deadline_timestamp: str
    note: str = ""
    invoice_key: str = ""
    order_number: str = ""


# ---------------------------------------------------------------------------
# Replies
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RemoteReply:
    """Fields read from the result fragment of one completed SSW call."""

    outcome_code: Optional[int]
    raw_outcome: str = ""
    message: str = ""
    freight_value: Optional[Decimal] = None
    deadline_days: Optional[int] = None
    quotation_number: str = ""
    token: str = field(default="", repr=False)
    protocol: str = ""


@dataclass(frozen=True)
class SoapEnvelope:
    """A rendered SOAP request: the ordered wire fields plus the body text."""

    operation: SoapOperation
    fields: Tuple[Tuple[str, str], ...]
    body: str = field(repr=False)

    def as_dict(self) -> dict:
        return dict(self.fields)


# ---------------------------------------------------------------------------
# Transport interface
# ---------------------------------------------------------------------------

class SoapTransport(ABC):
    """Sends one rendered envelope to SSW and returns the raw reply text."""

    @abstractmethod
    async def send(self, envelope: SoapEnvelope, soap_action: str) -> str:
        """Post the envelope; raise TransportError when no reply could be read."""


__all__ = [
    "CallState",
    "CanonicalRequest",
    "CollectionRequest",
    "Credentials",
    "PaymentResponsibility",
    "QuotationExtras",
    "RemoteReply",
    "SoapEnvelope",
    "SoapOperation",
    "SoapTransport",
    "TERMINAL_STATES",
]
