# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Google Safe Browsing v4 lookup adapter."""

from __future__ import annotations

from typing import Any

from repwatch import __version__
from repwatch.adapters.base import VerdictAdapter
from repwatch.core.constants import (
    DEFAULT_ADAPTER_TIMEOUT,
    SAFE_BROWSING_ENDPOINT,
    SAFE_BROWSING_THREAT_TYPES,
    Source,
)


def build_lookup_body(url: str) -> dict[str, Any]:
    """Build a ``threatMatches:find`` request body for a single URL."""
    return {
        "client": {"clientId": "repwatch", "clientVersion": __version__},
        "threatInfo": {
            "threatTypes": list(SAFE_BROWSING_THREAT_TYPES),
            "platformTypes": ["ANY_PLATFORM"],
            "threatEntryTypes": ["URL"],
            "threatEntries": [{"url": url}],
        },
    }


class SafeBrowsingAdapter(VerdictAdapter):
    """Ask Google Safe Browsing whether a URL matches any threat list.

    An empty JSON object means no match.
    """

    source = Source.GOOGLE

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
        endpoint: str = SAFE_BROWSING_ENDPOINT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._api_key = api_key
        self.endpoint = endpoint

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        async with self._client() as client:
            resp = await client.post(
                self.endpoint,
                params={"key": self._api_key},
                json=build_lookup_body(target_url),
            )
        return self._check_response(resp)
