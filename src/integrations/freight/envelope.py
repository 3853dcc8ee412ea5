"""SOAP envelope builder for the SSW ``cotarSite`` and ``coletar`` operations.

SSW reads the RPC arguments positionally, so the field tuples below fix the
wire order. Values are escaped here and nowhere else.
"""

from __future__ import annotations

from typing import Any, Iterable, Tuple

from src.integrations.contracts.freight import (
    CanonicalRequest,
    CollectionRequest,
    SoapEnvelope,
    SoapOperation,
)
from src.integrations.freight.converters import as_str, format_fixed
from src.utils.config_loader import DEFAULT_NAMESPACE

QUOTATION_FIELDS = (
    "dominio",
    "login",
    "senha",
    "cnpjPagador",
    "senhaPagador",
    "cepOrigem",
    "cepDestino",
    "valorNF",
    "quantidade",
    "peso",
    "volume",
    "mercadoria",
    "ciffob",
    "cnpjRemetente",
    "cnpjDestinatario",
    "observacao",
    "trt",
    "coletar",
    "entDificil",
    "destContribuinte",
    "qtdePares",
    "altura",
    "largura",
    "comprimento",
    "fatorMultiplicador",
)

COLLECTION_FIELDS = (
    "dominio",
    "login",
    "senha",
    "cotacao",
    "limiteColeta",
    "token",
    "solicitante",
    "observacao",
    "chaveNFe",
    "nroPedido",
)

SECRET_FIELDS = frozenset({"senha", "senhaPagador", "token"})

_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)


def escape_xml(value: Any) -> str:
    text = as_str(value)
    for char, entity in _ESCAPES:
        text = text.replace(char, entity)
    return text


class SoapEnvelopeBuilder:
    """Builds SOAP 1.1 RPC envelopes for the SSW service."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace

    def soap_action(self, operation: SoapOperation) -> str:
        return f"{self.namespace}#{operation.value}"

    def quotation(self, request: CanonicalRequest) -> SoapEnvelope:
        creds = request.credentials
        extras = request.extras
        values = (
            creds.domain,
            creds.login,
            creds.password,
            request.payer_document,
            creds.payer_password,
            request.origin_postal_code,
            request.destination_postal_code,
            format_fixed(request.merchandise_value, 2),
            str(request.quantity),
            format_fixed(request.weight, 3),
            format_fixed(request.volume, 4),
            str(request.merchandise_type_code),
            request.payment_responsibility.wire_value,
            request.sender_document,
            request.recipient_document,
            request.note,
            extras.trt,
            "S" if request.collection_requested else "N",
            extras.difficult_delivery,
            extras.recipient_taxpayer,
            extras.pair_count,
            format_fixed(request.height, 3),
            format_fixed(request.width, 3),
            format_fixed(request.length, 3),
            extras.multiplier_factor,
        )
        return self.render(SoapOperation.QUOTATION, zip(QUOTATION_FIELDS, values))

    def collection(self, request: CollectionRequest) -> SoapEnvelope:
        creds = request.credentials
        values = (
            creds.domain,
            creds.login,
            creds.password,
            request.quotation_number,
            request.deadline_timestamp,
            request.token,
            request.requester,
            request.note,
            request.invoice_key,
            request.order_number,
        )
        return self.render(SoapOperation.COLLECTION, zip(COLLECTION_FIELDS, values))

    def render(self, operation: SoapOperation, fields: Iterable[Tuple[str, Any]]) -> SoapEnvelope:
        ordered = tuple((name, as_str(value)) for name, value in fields)
        params_xml = "\n      ".join(f"<{name}>{escape_xml(value)}</{name}>" for name, value in ordered)

        body = f"""<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"
               xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
               xmlns:tns="{escape_xml(self.namespace)}">
  <soap:Body>
    <tns:{operation.value}>
      {params_xml}
    </tns:{operation.value}>
  </soap:Body>
</soap:Envelope>"""
        return SoapEnvelope(operation=operation, fields=ordered, body=body)
