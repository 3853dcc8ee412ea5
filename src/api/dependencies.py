"""
Request guards shared by every freight route.

API keys come from the comma-separated API_KEYS environment variable and are
sent by callers in the X-API-KEY header. With no keys configured the bridge
runs open, which is what local development and the mock integration mode use.
"""

import hmac
import logging
import os
from typing import List, Optional

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)

OPEN_PATHS = frozenset({
    "/",
    "/health",
    "/docs",
    "/docs/oauth2-redirect",
    "/openapi.json",
    "/redoc",
})


def configured_api_keys() -> List[str]:
    return [key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip()]


def _key_matches(candidate: str, keys: List[str]) -> bool:
    matched = False
    for key in keys:
        matched |= hmac.compare_digest(candidate.encode("utf-8"), key.encode("utf-8"))
    return matched


async def api_key_protection(
    request: Request = None,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY"),
):
    path = request.url.path if request is not None else ""
    if path in OPEN_PATHS:
        return

    keys = configured_api_keys()
    if not keys:
        return

    candidate = (x_api_key or "").strip()
    if candidate and _key_matches(candidate, keys):
        return

    logger.warning("Rejected request to %s: invalid or missing API key", path or "<direct call>")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API Key",
    )
