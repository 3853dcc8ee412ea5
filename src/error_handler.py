"""Turns exceptions escaping the freight engine into HTTP responses."""
from typing import Any, Dict, Tuple
import logging

from src.integrations.freight.errors import TransportError

logger = logging.getLogger(__name__)

GATEWAY_TIMEOUT = 504
BAD_GATEWAY = 502


class ErrorHandler:
    def handle_transport_error(self, exc: TransportError) -> Tuple[int, Dict[str, Any]]:
        """SSW unreachable or silent: 504 on timeout, 502 otherwise. The request echo is already masked."""
        operation = exc.operation.value if exc.operation is not None else "?"
        logger.warning("SSW %s transport failure: %s", operation, exc.message)
        return (GATEWAY_TIMEOUT if exc.timed_out else BAD_GATEWAY), exc.to_dict()

    def handle_exception(self, exc: Exception, context: Dict[str, Any] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in freight bridge: %s", exc, exc_info=True)
        return {
            "ok": False,
            "code": "INTERNAL_ERROR",
            "reason": "An internal error occurred while processing your request. Please try again later.",
            "metadata": {"error": str(exc), "context": context or {}},
        }
