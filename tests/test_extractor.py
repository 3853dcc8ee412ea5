"""Response extractor: every reply shape SSW has been seen answering with."""

import html
import warnings
from decimal import Decimal

import pytest
from bs4 import XMLParsedAsHTMLWarning

from src.integrations.freight.extractor import ResponseExtractor

QUOTE_FRAGMENT = (
    "<quote><outcome>0</outcome><message>OK</message><freight>159,77</freight>"
    "<deadline>5</deadline><quoteNumber>123</quoteNumber></quote>"
)

SSW_FRAGMENT = (
    '<?xml version="1.0" encoding="ISO-8859-1"?>'
    "<cotacao><erro>0</erro><mensagem></mensagem><frete>1.234,56</frete><prazo>2</prazo>"
    "<cotacao>000123</cotacao><token>ABC123</token></cotacao>"
)


def soap_reply(inner: str, *, response_element: bool = True, wrapper: str = "return") -> str:
    body = f'<{wrapper} xsi:type="xsd:string">{inner}</{wrapper}>'
    if response_element:
        body = f"<ns1:cotarSiteResponse>{body}</ns1:cotarSiteResponse>"
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<SOAP-ENV:Envelope xmlns:SOAP-ENV="http://schemas.xmlsoap.org/soap/envelope/">'
        f"<SOAP-ENV:Body>{body}</SOAP-ENV:Body></SOAP-ENV:Envelope>"
    )


@pytest.fixture
def extractor():
    return ResponseExtractor()


def test_strategy_order_is_fixed():
    assert ResponseExtractor.STRATEGIES == ("wrapper", "wrapper_search", "raw_body", "decoded_body")


def test_wrapper_directly_under_body(extractor):
    extraction = extractor.extract(soap_reply(html.escape(QUOTE_FRAGMENT), response_element=False))

    assert extraction.found
    assert extraction.strategy == "wrapper"
    assert extraction.fields["freight"] == "159,77"
    assert extraction.fields["deadline"] == "5"
    assert extraction.fields["quotation_number"] == "123"


def test_wrapper_nested_in_operation_response(extractor):
    extraction = extractor.extract(soap_reply(html.escape(SSW_FRAGMENT)))

    assert extraction.strategy == "wrapper"
    reply = extractor.to_reply(extraction)
    assert reply.outcome_code == 0
    assert reply.freight_value == Decimal("1234.56")
    assert reply.deadline_days == 2
    assert reply.quotation_number == "000123"
    assert reply.token == "ABC123"


def test_wrapper_with_namespace_prefix(extractor):
    extraction = extractor.extract(soap_reply(html.escape(QUOTE_FRAGMENT), wrapper="ns1:return"))
    assert extraction.found
    assert extraction.strategy == "wrapper"


def test_double_escaped_wrapper_text(extractor):
    twice = html.escape(html.escape(SSW_FRAGMENT))
    extraction = extractor.extract(soap_reply(twice))
    assert extraction.strategy == "wrapper"
    assert extraction.fields["token"] == "ABC123"


def test_wrapper_holding_inline_markup(extractor):
    extraction = extractor.extract(soap_reply("<cotacao><erro>0</erro><frete>10,00</frete></cotacao>"))
    assert extraction.strategy == "wrapper"
    assert extraction.fields["freight"] == "10,00"


def test_fragment_buried_inside_wrapper_text(extractor):
    inner = html.escape(f"<resposta><status>ok</status>{QUOTE_FRAGMENT}</resposta>")
    extraction = extractor.extract(soap_reply(inner))
    assert extraction.strategy == "wrapper_search"
    assert extraction.fields["quotation_number"] == "123"


def test_fragment_inline_without_wrapper(extractor):
    raw = f"<html><body>{SSW_FRAGMENT}</body></html>"
    extraction = extractor.extract(raw)
    assert extraction.strategy == "raw_body"
    assert extraction.fields["quotation_number"] == "000123"


def test_escaped_fragment_without_wrapper(extractor):
    raw = f"<soap:Body><resultado>{html.escape(QUOTE_FRAGMENT)}</resultado></soap:Body>"
    extraction = extractor.extract(raw)
    assert extraction.strategy == "decoded_body"
    assert extraction.fields["freight"] == "159,77"


def test_no_payload_is_reported_not_raised(extractor):
    raw = "<html><body><h1>502 Bad Gateway</h1></body></html>"
    extraction = extractor.extract(raw)

    assert extraction.found is False
    assert extraction.raw_body_prefix == raw
    assert extraction.fields == {}


def test_empty_wrapper_is_no_payload(extractor):
    extraction = extractor.extract(soap_reply(""))
    assert extraction.found is False


@pytest.mark.parametrize("raw", [None, "", "plain text", "<<<>>>&&&", b"\x00\x01"])
def test_garbage_never_raises(extractor, raw):
    assert extractor.extract(raw).found is False


def test_raw_body_prefix_is_bounded():
    extraction = ResponseExtractor(preview_chars=100).extract("x" * 5000)
    assert extraction.raw_body_prefix == "x" * 100


def test_missing_tags_read_as_empty(extractor):
    extraction = extractor.extract(soap_reply(html.escape("<cotacao><erro>0</erro></cotacao>")))
    reply = extractor.to_reply(extraction)

    assert extraction.fields["freight"] == ""
    assert reply.freight_value is None
    assert reply.deadline_days is None
    assert reply.quotation_number == ""
    assert reply.message == ""


def test_fields_are_read_independently(extractor):
    fragment = "<cotacao><erro>0</erro><frete>abc</frete><prazo>5 dias</prazo><token>T</token></cotacao>"
    reply = extractor.to_reply(extractor.extract(soap_reply(html.escape(fragment))))

    assert reply.freight_value is None
    assert reply.deadline_days == 5
    assert reply.token == "T"


@pytest.mark.parametrize("raw_outcome, code", [("0", 0), (" 7 ", 7), ("-1", -1), ("OK", None), ("", None)])
def test_outcome_code_parsing(extractor, raw_outcome, code):
    fragment = f"<cotacao><erro>{raw_outcome}</erro></cotacao>"
    reply = extractor.to_reply(extractor.extract(soap_reply(html.escape(fragment))))
    assert reply.outcome_code == code
    assert reply.raw_outcome == raw_outcome.strip()


def test_collection_reply_fields(extractor):
    fragment = "<coleta><codigo>0</codigo><msg>Coleta agendada</msg><protocolo>COL55</protocolo></coleta>"
    reply = extractor.to_reply(extractor.extract(soap_reply(html.escape(fragment))))
    assert reply.outcome_code == 0
    assert reply.message == "Coleta agendada"
    assert reply.protocol == "COL55"


def test_oversized_numbers_are_not_read_as_integers(extractor):
    digits = "9" * 5000
    fragment = f"<cotacao><erro>{digits}</erro><prazo>{digits}</prazo><frete>1e999999</frete></cotacao>"
    reply = extractor.to_reply(extractor.extract(soap_reply(html.escape(fragment))))

    assert reply.outcome_code is None
    assert reply.raw_outcome == digits
    assert reply.deadline_days is None


def test_parser_warning_filters_do_not_leak(extractor):
    before = list(warnings.filters)
    extractor.extract(soap_reply(html.escape(SSW_FRAGMENT)))
    assert warnings.filters == before
    assert not any(entry[2] is XMLParsedAsHTMLWarning for entry in warnings.filters)
