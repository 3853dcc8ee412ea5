"""Input normalizer for freight payloads.

Client payloads arrive with two historical naming schemes: our own generic
names (``merchandiseValue``, ``payerDocument``...) and the SSW field names
(``valorNF``, ``cnpjPagador``...). ``QUOTE_ALIASES`` and ``COLLECTION_ALIASES``
are the only place where those names are declared; the generic name is listed
first and wins when both are present.

The normalizer never rejects a payload. It produces the canonical contract and
leaves every precondition to ``validation``.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

from src.integrations.contracts.freight import (
    CanonicalRequest,
    CollectionRequest,
    Credentials,
    PaymentResponsibility,
    QuotationExtras,
)
from src.integrations.freight.converters import (
    as_str,
    digits_only,
    pad_document,
    quantize,
    to_decimal,
    to_int,
)
from src.utils.config_loader import SswConfig

logger = logging.getLogger(__name__)

QUOTE_ALIASES: Dict[str, Tuple[str, ...]] = {
    "domain": ("domain", "dominio"),
    "login": ("login",),
    "password": ("password", "senha"),
    "payer_password": ("payerPassword", "senhaPagador"),
    "payer_document": ("payerDocument", "cnpjPagador"),
    "origin_postal_code": ("originPostalCode", "cepOrigem"),
    "destination_postal_code": ("destinationPostalCode", "cepDestino"),
    "merchandise_value": ("merchandiseValue", "valorMercadoria", "valorNF"),
    "quantity": ("quantity", "quantidade"),
    "weight": ("weight", "peso"),
    "volume": ("volume",),
    "height": ("height", "altura"),
    "width": ("width", "largura"),
    "length": ("length", "comprimento"),
    "merchandise_type_code": ("merchandiseTypeCode", "mercadoria"),
    "payment_responsibility": ("paymentResponsibility", "ciffob"),
    "sender_document": ("senderDocument", "cnpjRemetente"),
    "recipient_document": ("recipientDocument", "cnpjDestinatario"),
    "note": ("note", "observacao"),
    "collection_requested": ("collectionRequested", "coletar"),
    "trt": ("trt",),
    "difficult_delivery": ("difficultDelivery", "entDificil"),
    "recipient_taxpayer": ("recipientTaxpayer", "destContribuinte"),
    "pair_count": ("pairCount", "qtdePares"),
    "multiplier_factor": ("multiplierFactor", "fatorMultiplicador"),
}

COLLECTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "domain": ("domain", "dominio"),
    "login": ("login",),
    "password": ("password", "senha"),
    "quotation_number": ("quotationNumber", "cotacao"),
    "token": ("token",),
    "requester": ("requester", "solicitante"),
    "deadline_timestamp": ("deadlineTimestamp", "limiteColeta"),
    "date": ("date", "data"),
    "time": ("time", "hora"),
    "note": ("note", "observacao"),
    "invoice_key": ("invoiceKey", "chaveNFe"),
    "order_number": ("orderNumber", "nroPedido"),
}

_PAYER_WORDS = {"c", "cif", "payer", "pagador", "remetente", "sender"}
_RECIPIENT_WORDS = {"f", "fob", "recipient", "destinatario", "consignee"}
_TRUE_WORDS = {"s", "sim", "y", "yes", "true", "1", "on"}
_FALSE_WORDS = {"n", "nao", "no", "false", "0", "off"}
_DEFAULT_TIME_WORDS = {"padrao", "default"}
_TIME_RE = re.compile(r"^\s*(\d{1,2})(?::(\d{1,2}))?")

_ZERO = Decimal(0)


def _fold(value: Any) -> str:
    """Lower-case and strip accents so "Padrão", "PADRAO" and "padrao" compare equal."""
    text = unicodedata.normalize("NFKD", as_str(value).strip().casefold())
    return "".join(ch for ch in text if not unicodedata.combining(ch))


def pick(payload: Mapping[str, Any], aliases: Tuple[str, ...]) -> Any:
    """Return the first non-absent alias value; blank strings count as absent."""
    for key in aliases:
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def normalize_payment_responsibility(value: Any) -> PaymentResponsibility:
    folded = _fold(value)
    if folded in _PAYER_WORDS:
        return PaymentResponsibility.PAYER
    if folded not in _RECIPIENT_WORDS and folded:
        logger.debug("Unrecognized payment responsibility %r, using recipient", value)
    return PaymentResponsibility.RECIPIENT


def normalize_flag(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    folded = _fold(value)
    if folded in _TRUE_WORDS:
        return True
    if folded in _FALSE_WORDS:
        return False
    return default


def _non_negative(value: Any, places: int) -> Decimal:
    number = to_decimal(value)
    if number is None or number < 0:
        return quantize(_ZERO, places)
    fixed = quantize(number, places)
    if fixed is None:
        logger.debug("Value %r out of range, treated as 0", value)
        return quantize(_ZERO, places)
    return fixed


def _optional_dimension(value: Any) -> Optional[Decimal]:
    number = to_decimal(value)
    if number is None:
        return None
    return quantize(max(number, _ZERO), 3)


def derive_volume(
    height: Optional[Decimal],
    width: Optional[Decimal],
    length: Optional[Decimal],
    quantity: int,
) -> Optional[Decimal]:
    """Cubic volume from dimensions, only when every factor is positive."""
    factors = (height, width, length)
    if quantity <= 0 or any(f is None or f <= 0 for f in factors):
        return None
    return quantize(height * width * length * quantity, 4)


def _credentials(payload: Mapping[str, Any], aliases: Dict[str, Tuple[str, ...]], config: SswConfig) -> Credentials:
    fallback = config.credentials
    payer_password = ""
    if "payer_password" in aliases:
        payer_password = as_str(pick(payload, aliases["payer_password"]) or fallback.payer_password)
    return Credentials(
        domain=as_str(pick(payload, aliases["domain"]) or fallback.domain).strip(),
        login=as_str(pick(payload, aliases["login"]) or fallback.login).strip(),
        password=as_str(pick(payload, aliases["password"]) or fallback.password),
        payer_password=payer_password,
    )


def _text(payload: Mapping[str, Any], aliases: Tuple[str, ...]) -> str:
    return as_str(pick(payload, aliases)).strip()


def normalize_quote_request(payload: Optional[Mapping[str, Any]], config: SswConfig) -> CanonicalRequest:
    b = payload or {}
    a = QUOTE_ALIASES

    quantity = to_int(pick(b, a["quantity"]))
    if quantity is None or quantity < 1:
        quantity = 1

    merchandise_type = to_int(pick(b, a["merchandise_type_code"]))
    if merchandise_type is None or merchandise_type < 1:
        merchandise_type = 1

    height = _optional_dimension(pick(b, a["height"]))
    width = _optional_dimension(pick(b, a["width"]))
    length = _optional_dimension(pick(b, a["length"]))

    volume = _non_negative(pick(b, a["volume"]), 4)
    if volume == 0:
        derived = derive_volume(height, width, length, quantity)
        if derived is not None:
            volume = derived

    payer_document = pad_document(pick(b, a["payer_document"]))
    responsibility = normalize_payment_responsibility(pick(b, a["payment_responsibility"]))
    sender_document = pad_document(pick(b, a["sender_document"]))
    recipient_document = pad_document(pick(b, a["recipient_document"]))
    if responsibility is PaymentResponsibility.PAYER and not sender_document:
        sender_document = payer_document
    elif responsibility is PaymentResponsibility.RECIPIENT and not recipient_document:
        recipient_document = payer_document

    return CanonicalRequest(
        credentials=_credentials(b, a, config),
        payer_document=payer_document,
        origin_postal_code=digits_only(pick(b, a["origin_postal_code"])),
        destination_postal_code=digits_only(pick(b, a["destination_postal_code"])),
        merchandise_value=_non_negative(pick(b, a["merchandise_value"]), 2),
        quantity=quantity,
        weight=_non_negative(pick(b, a["weight"]), 3),
        volume=volume,
        height=height,
        width=width,
        length=length,
        payment_responsibility=responsibility,
        sender_document=sender_document,
        recipient_document=recipient_document,
        collection_requested=normalize_flag(pick(b, a["collection_requested"]), config.collect_by_default),
        note=as_str(pick(b, a["note"]))[: config.note_max_length],
        merchandise_type_code=merchandise_type,
        extras=QuotationExtras(
            trt=_text(b, a["trt"]),
            difficult_delivery=_text(b, a["difficult_delivery"]),
            recipient_taxpayer=_text(b, a["recipient_taxpayer"]),
            pair_count=_text(b, a["pair_count"]),
            multiplier_factor=_text(b, a["multiplier_factor"]),
        ),
    )


def build_deadline_timestamp(date_value: Any, time_value: Any, default_time: str = "17:00") -> str:
    """ISO-8601 local timestamp from a date and a time-of-day.

    A missing time, or the literal "padrão"/"default", means ``default_time``.
    Returns "" when there is no date.
    """
    date_text = as_str(date_value).strip()
    if not date_text:
        return ""

    time_text = as_str(time_value).strip()
    if not time_text or _fold(time_text) in _DEFAULT_TIME_WORDS:
        time_text = default_time

    match = _TIME_RE.match(time_text) or _TIME_RE.match(default_time)
    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    return f"{date_text}T{hour:02d}:{minute:02d}:00"


def normalize_collection_request(payload: Optional[Mapping[str, Any]], config: SswConfig) -> CollectionRequest:
    b = payload or {}
    a = COLLECTION_ALIASES

    deadline = _text(b, a["deadline_timestamp"])
    if not deadline:
        deadline = build_deadline_timestamp(
            pick(b, a["date"]), pick(b, a["time"]), config.default_collection_time
        )

    return CollectionRequest(
        credentials=_credentials(b, a, config),
        quotation_number=digits_only(pick(b, a["quotation_number"])),
        token=_text(b, a["token"]),
        requester=_text(b, a["requester"]),
        deadline_timestamp=deadline,
        note=as_str(pick(b, a["note"]))[: config.note_max_length],
        invoice_key=_text(b, a["invoice_key"]),
        order_number=_text(b, a["order_number"]),
    )
