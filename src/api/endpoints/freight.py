import logging
import os
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from src.error_handler import ErrorHandler
from src.integrations.clients.mocks.ssw import MockSswClient
from src.integrations.clients.real_http.ssw import SswSoapClient
from src.integrations.contracts.freight import CallState
from src.integrations.freight.engine import FreightEngine
from src.integrations.freight.errors import TransportError
from src.utils.config_loader import load_ssw_config

logger = logging.getLogger(__name__)

freight_api = APIRouter()
legacy_api = APIRouter()

error_handler = ErrorHandler()

_FAILURE_STATUS = {
    CallState.REJECTED: 400,
    CallState.BUSINESS_FAILURE: 422,
    CallState.PROTOCOL_FAILED: 502,
}

_engine: Optional[FreightEngine] = None


def _should_use_mock_integrations() -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    return mode in {"mock", "test"}


def get_engine() -> FreightEngine:
    global _engine
    if _engine is None:
        config = load_ssw_config()
        if _should_use_mock_integrations():
            logger.info("Freight engine using mock SSW client")
            transport = MockSswClient()
        else:
            transport = SswSoapClient(endpoint=config.endpoint, timeout_seconds=config.timeout_seconds)
        _engine = FreightEngine(transport, config)
    return _engine


async def _run(
    operation: str,
    call: Callable[[Optional[Dict[str, Any]]], Awaitable[Any]],
    payload: Optional[Dict[str, Any]],
) -> JSONResponse:
    try:
        result = await call(payload)
    except TransportError as e:
        status_code, content = error_handler.handle_transport_error(e)
        return JSONResponse(status_code=status_code, content=content)
    except Exception as e:
        return JSONResponse(status_code=500, content=error_handler.handle_exception(e, {"operation": operation}))

    status_code = 200 if result.ok else _FAILURE_STATUS.get(result.state, 500)
    return JSONResponse(status_code=status_code, content=result.to_dict())


@freight_api.post("/quote", tags=["Freight"])
async def quote_freight(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    engine: FreightEngine = Depends(get_engine),
):
    return await _run("cotarSite", engine.quote, payload)


@freight_api.post("/collection", tags=["Freight"])
async def request_collection(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    engine: FreightEngine = Depends(get_engine),
):
    return await _run("coletar", engine.request_collection, payload)


# Older callers post to these paths.
legacy_api.add_api_route("/cotacao", quote_freight, methods=["POST"], tags=["Freight (legacy)"])
legacy_api.add_api_route("/coleta", request_collection, methods=["POST"], tags=["Freight (legacy)"])
