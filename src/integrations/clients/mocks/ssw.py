"""
Mock SSW Client.

Purpose:
- Provides a fake SSW integration used for development/testing
- Does NOT make any network calls
- Answers in the same shape SSW uses: an escaped `<cotacao>`/`<coleta>`
  fragment inside `<return>`, nested in the operation response element

Behavior guidelines:
- cotarSite: freight priced from weight and invoice value, fixed deadline
- coletar: returns a collection protocol derived from the quotation number
- login "invalid" answers with an SSW-style login error
- every envelope received is kept in `calls` for assertions

Swap:
Replace this mock client with the real HTTP client in clients/real_http/ssw.py
when SSW credentials are configured.
"""

from __future__ import annotations

import html
from decimal import Decimal
from typing import List, Optional, Tuple

from src.integrations.contracts.freight import SoapEnvelope, SoapOperation, SoapTransport
from src.integrations.freight.converters import quantize, to_decimal

MOCK_TOKEN = "MOCK-TOKEN-0001"
MOCK_QUOTATION_NUMBER = "900001"
MOCK_DEADLINE_DAYS = 3
INVALID_LOGIN = "invalid"


def wrap_reply(operation: SoapOperation, fragment: str) -> str:
    """Embed a result fragment the way SSW does."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/" xmlns:ns1="urn:sswinfbr.sswCotacaoColeta">
  <SOAP-ENV:Body>
    <ns1:{operation.value}Response>
      <return xsi:type="xsd:string">{html.escape(fragment, quote=False)}</return>
    </ns1:{operation.value}Response>
  </SOAP-ENV:Body>
</SOAP-ENV:Envelope>"""


def _comma_decimal(value: Decimal) -> str:
    fixed = quantize(value, 2)
    return "" if fixed is None else f"{fixed:f}".replace(".", ",")


class MockSswClient(SoapTransport):
    def __init__(self, reply: Optional[str] = None) -> None:
        self.reply = reply
        self.calls: List[Tuple[SoapEnvelope, str]] = []

    async def send(self, envelope: SoapEnvelope, soap_action: str) -> str:
        self.calls.append((envelope, soap_action))
        if self.reply is not None:
            return self.reply

        args = envelope.as_dict()
        if args.get("login") == INVALID_LOGIN:
            fragment = "<erro>7</erro><mensagem>Login invalido</mensagem>"
        elif envelope.operation is SoapOperation.QUOTATION:
            fragment = self._quotation_fragment(args)
        else:
            fragment = self._collection_fragment(args)

        root = "cotacao" if envelope.operation is SoapOperation.QUOTATION else "coleta"
        return wrap_reply(envelope.operation, f"<{root}>{fragment}</{root}>")

    @staticmethod
    def _quotation_fragment(args) -> str:
        weight = to_decimal(args.get("peso")) or Decimal(0)
        invoice = to_decimal(args.get("valorNF")) or Decimal(0)
        freight = Decimal("45.00") + weight * Decimal("1.25") + invoice * Decimal("0.003")
        return (
            "<erro>0</erro>"
            "<mensagem>OK</mensagem>"
            f"<frete>{_comma_decimal(freight)}</frete>"
            f"<prazo>{MOCK_DEADLINE_DAYS}</prazo>"
            f"<cotacao>{MOCK_QUOTATION_NUMBER}</cotacao>"
            f"<token>{MOCK_TOKEN}</token>"
        )

    @staticmethod
    def _collection_fragment(args) -> str:
        if args.get("token") != MOCK_TOKEN:
            return "<erro>12</erro><mensagem>Token nao confere com a cotacao</mensagem>"
        return (
            "<erro>0</erro>"
            "<mensagem>Coleta agendada</mensagem>"
            f"<protocoloColeta>COL{args.get('cotacao', '')}</protocoloColeta>"
        )
