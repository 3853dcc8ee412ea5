from __future__ import annotations

from typing import Any, Dict, List, Optional

from src.integrations.contracts.freight import SoapOperation


class FreightError(Exception):
    """Base class for every outcome that is not a successful SSW answer."""

    code = "FREIGHT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "code": self.code, "reason": self.message}


class RequestValidationError(FreightError):
    code = "VALIDATION_FAILED"

    def __init__(self, violations: List[str]) -> None:
        super().__init__("; ".join(violations) or "Invalid request")
        self.violations = list(violations)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "code": self.code, "violations": list(self.violations)}


class TransportError(FreightError):
    code = "TRANSPORT_FAILED"

    def __init__(
        self,
        reason: str,
        *,
        operation: Optional[SoapOperation] = None,
        masked_request: Optional[Dict[str, str]] = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(reason)
        self.operation = operation
        self.masked_request = masked_request or {}
        self.timed_out = timed_out

    def with_context(self, operation: SoapOperation, masked_request: Dict[str, str]) -> "TransportError":
        self.operation = operation
        self.masked_request = masked_request
        return self

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.operation is not None:
            payload["operation"] = self.operation.value
        if self.masked_request:
            payload["sentArgs"] = dict(self.masked_request)
        return payload


class ProtocolError(FreightError):
    code = "NO_RESULT_PAYLOAD"

    def __init__(self, reason: str, *, raw_body_prefix: str = "") -> None:
        super().__init__(reason)
        self.raw_body_prefix = raw_body_prefix

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["rawBodyPrefix"] = self.raw_body_prefix
        return payload


class BusinessError(FreightError):
    code = "REMOTE_BUSINESS_ERROR"

    def __init__(self, outcome_code: Optional[int], message: str, *, raw_outcome: str = "") -> None:
        super().__init__(message)
        self.outcome_code = outcome_code
        self.raw_outcome = raw_outcome

    @property
    def is_authorization(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "code": self.code,
            "outcomeCode": self.outcome_code,
            "message": self.message,
            "authorization": self.is_authorization,
        }


class AuthorizationError(BusinessError):
    """The remote service rejected the account credentials."""

    code = "REMOTE_AUTHORIZATION_ERROR"

    @property
    def is_authorization(self) -> bool:
        return True
