"""
Freight bridge to the SSW quotation / collection-request web service.

Pipeline (one call per inbound payload):
- normalizer: alias table + unit/format conversion into the canonical contracts
- validation: every precondition checked, all violations reported together
- envelope: ordered, escaped SOAP envelopes for cotarSite / coletar
- extractor: multi-strategy lookup of the result fragment in the reply
- classifier: success / business / authorization / protocol outcomes
- engine: wires the stages together around a single transport call

The transport (real HTTP or mock) is injected; see src/integrations/clients.
"""

from .classifier import CollectionSuccess, FreightFailure, QuoteSuccess, ResultClassifier
from .engine import FreightEngine
from .errors import (
    AuthorizationError,
    BusinessError,
    FreightError,
    ProtocolError,
    RequestValidationError,
    TransportError,
)

__all__ = [
    "AuthorizationError",
    "BusinessError",
    "CollectionSuccess",
    "FreightEngine",
    "FreightError",
    "FreightFailure",
    "ProtocolError",
    "QuoteSuccess",
    "RequestValidationError",
    "ResultClassifier",
    "TransportError",
]
