import html
from decimal import Decimal

import pytest

from src.integrations.contracts.freight import CallState, RemoteReply, SoapOperation
from src.integrations.freight.classifier import (
    MASK,
    CollectionSuccess,
    QuoteSuccess,
    ResultClassifier,
    diagnostics_for,
    mask_fields,
)
from src.integrations.freight.envelope import SoapEnvelopeBuilder
from src.integrations.freight.errors import AuthorizationError, BusinessError, ProtocolError
from src.integrations.freight.extractor import ResponseExtractor
from src.integrations.freight.normalizer import normalize_quote_request
from src.utils.config_loader import ClassifierConfig


def reply(raw_outcome="0", message="", **kwargs):
    stripped = raw_outcome.strip()
    code = int(stripped) if stripped.lstrip("-").isdigit() else None
    return RemoteReply(outcome_code=code, raw_outcome=stripped, message=message, **kwargs)


@pytest.fixture
def classifier():
    return ResultClassifier()


def test_quote_fragment_classifies_as_success(classifier):
    fragment = (
        "<quote><outcome>0</outcome><message>OK</message><freight>159,77</freight>"
        "<deadline>5</deadline><quoteNumber>123</quoteNumber></quote>"
    )
    extractor = ResponseExtractor()
    raw = f"<soap:Body><return>{html.escape(fragment)}</return></soap:Body>"

    result = classifier.classify_quote(extractor.to_reply(extractor.extract(raw)))

    assert isinstance(result, QuoteSuccess)
    assert result.ok and result.state is CallState.SUCCESS
    assert result.freight_value == 159.77
    assert result.deadline_days == 5
    assert result.quotation_number == "123"
    assert result.to_dict()["freightValue"] == 159.77


@pytest.mark.parametrize("raw_outcome", ["0", "", "OK", "ok"])
def test_success_outcomes(classifier, raw_outcome):
    assert classifier.is_success(reply(raw_outcome))


@pytest.mark.parametrize("raw_outcome", ["1", "-1", "12", "FALHA"])
def test_failure_outcomes(classifier, raw_outcome):
    assert not classifier.is_success(reply(raw_outcome))


def test_invalid_login_is_an_authorization_failure(classifier):
    result = classifier.classify_quote(reply("7", "Invalid login"))

    assert not result.ok
    assert result.state is CallState.BUSINESS_FAILURE
    assert isinstance(result.error, AuthorizationError)
    body = result.to_dict()
    assert body["outcomeCode"] == 7
    assert body["authorization"] is True
    assert body["code"] == "REMOTE_AUTHORIZATION_ERROR"


def test_configured_authorization_codes():
    classifier = ResultClassifier(ClassifierConfig(auth_error_codes=[33], auth_error_keywords=[]))
    assert isinstance(classifier.business_error(reply("33", "Acesso negado")), AuthorizationError)
    assert type(classifier.business_error(reply("34", "Acesso negado"))) is BusinessError


def test_other_outcomes_are_generic_business_errors(classifier):
    result = classifier.classify_quote(reply("3", "CEP de destino nao atendido"))

    assert type(result.error) is BusinessError
    assert result.to_dict() == {
        "ok": False,
        "code": "REMOTE_BUSINESS_ERROR",
        "outcomeCode": 3,
        "message": "CEP de destino nao atendido",
        "authorization": False,
    }


def test_non_numeric_failure_keeps_empty_code(classifier):
    result = classifier.classify_collection(reply("FALHA", "Erro interno"))
    assert result.error.outcome_code is None
    assert result.error.raw_outcome == "FALHA"


def test_success_without_message_gets_default(classifier):
    quote = classifier.classify_quote(reply("0", freight_value=Decimal("10.5")))
    assert quote.message == "OK"
    assert quote.freight_value == 10.5

    collection = classifier.classify_collection(reply("", protocol="COL1"))
    assert isinstance(collection, CollectionSuccess)
    assert collection.to_dict() == {"ok": True, "message": "OK", "protocol": "COL1"}


def test_quote_success_without_freight_tag(classifier):
    assert classifier.classify_quote(reply("0")).freight_value is None


def test_protocol_failure_carries_raw_prefix():
    extraction = ResponseExtractor(preview_chars=10).extract("<html>gateway down</html>")
    result = ResultClassifier.protocol_failure(extraction)

    assert result.state is CallState.PROTOCOL_FAILED
    assert isinstance(result.error, ProtocolError)
    body = result.to_dict()
    assert body["code"] == "NO_RESULT_PAYLOAD"
    assert body["rawBodyPrefix"] == "<html>gate"


def test_rejected_lists_violations():
    result = ResultClassifier.rejected(["a", "b"])
    assert result.state is CallState.REJECTED
    assert result.to_dict()["code"] == "VALIDATION_FAILED"
    assert result.error.violations == ["a", "b"]


def test_masking_hides_secrets_only(ssw_config, valid_payload):
    builder = SoapEnvelopeBuilder()
    envelope = builder.quotation(normalize_quote_request(valid_payload, ssw_config))
    masked = mask_fields(envelope)

    assert masked["senha"] == MASK
    assert masked["senhaPagador"] == MASK
    assert masked["login"] == "cotawa"
    assert masked["cepOrigem"] == "01310100"

    diagnostics = diagnostics_for(envelope, builder)
    assert diagnostics["sentArgs"] == masked
    assert "s3cret-pass" not in diagnostics["lastRequest"]
    assert f"<senha>{MASK}</senha>" in diagnostics["lastRequest"]
    # the envelope that went out is untouched
    assert "<senha>s3cret-pass</senha>" in envelope.body
    assert envelope.operation is SoapOperation.QUOTATION


def test_non_finite_freight_is_dropped(classifier):
    result = classifier.classify_quote(reply("0", freight_value=Decimal("1e999999")))
    assert result.ok
    assert result.freight_value is None
