# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""API key check for routes that spend provider quota or change state."""

from __future__ import annotations

import hmac

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader

from repwatch.core.config import get_settings

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _matches(candidate: str, keys: list[str]) -> bool:
    return any(hmac.compare_digest(candidate, key) for key in keys)


async def require_api_key(
    api_key: str | None = Security(_api_key_header),
) -> str:
    """Return the caller's key, or ``"anonymous"`` when no keys are configured.

    Blacklist reads do not use this dependency; the browser extension
    queries them without credentials.
    """
    keys = get_settings().api_keys
    if not keys:
        return "anonymous"

    if not api_key:
        raise HTTPException(status_code=401, detail="Missing X-API-Key header")
    if not _matches(api_key, keys):
        raise HTTPException(status_code=403, detail="Invalid API key")
    return api_key
