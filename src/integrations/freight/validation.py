"""Preconditions the SSW service needs before a call is worth making.

Every rule is evaluated; the caller gets the complete, ordered list of
violations so one response can report every problem at once. An empty list
means the request may be sent.
"""

from __future__ import annotations

from typing import List

from src.integrations.contracts.freight import (
    CanonicalRequest,
    CollectionRequest,
    Credentials,
    PaymentResponsibility,
)

MISSING_CREDENTIALS = "domain, login and password are required"
MISSING_PAYER_PASSWORD = "payerPassword is required"
MISSING_PAYER_DOCUMENT = "payerDocument is required"
MISSING_ORIGIN = "originPostalCode is required"
MISSING_DESTINATION = "destinationPostalCode is required"
MERCHANDISE_NOT_POSITIVE = "merchandiseValue must be > 0"
NO_WEIGHT_OR_VOLUME = "weight (> 0) or volume (> 0) is required"
BAD_PAYMENT_RESPONSIBILITY = "paymentResponsibility must be payer or recipient"

MISSING_QUOTATION_NUMBER = "quotationNumber is required"
MISSING_TOKEN = "token is required"
MISSING_REQUESTER = "requester is required"
MISSING_DEADLINE = "deadlineTimestamp (or date + time) is required"


def _credential_violations(credentials: Credentials, *, needs_payer_password: bool) -> List[str]:
    errors: List[str] = []
    if not credentials.is_complete:
        errors.append(MISSING_CREDENTIALS)
    if needs_payer_password and not credentials.payer_password:
        errors.append(MISSING_PAYER_PASSWORD)
    return errors


def validate_quote_request(request: CanonicalRequest) -> List[str]:
    errors = _credential_violations(request.credentials, needs_payer_password=True)

    if not request.payer_document:
        errors.append(MISSING_PAYER_DOCUMENT)
    if not request.origin_postal_code:
        errors.append(MISSING_ORIGIN)
    if not request.destination_postal_code:
        errors.append(MISSING_DESTINATION)
    if request.merchandise_value <= 0:
        errors.append(MERCHANDISE_NOT_POSITIVE)
    if request.weight <= 0 and request.volume <= 0:
        errors.append(NO_WEIGHT_OR_VOLUME)
    if not isinstance(request.payment_responsibility, PaymentResponsibility):
        errors.append(BAD_PAYMENT_RESPONSIBILITY)

    return errors


def validate_collection_request(request: CollectionRequest) -> List[str]:
    errors = _credential_violations(request.credentials, needs_payer_password=False)

    if not request.quotation_number:
        errors.append(MISSING_QUOTATION_NUMBER)
    if not request.token:
        errors.append(MISSING_TOKEN)
    if not request.requester:
        errors.append(MISSING_REQUESTER)
    if not request.deadline_timestamp:
        errors.append(MISSING_DEADLINE)

    return errors
