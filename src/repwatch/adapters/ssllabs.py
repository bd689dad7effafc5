# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Qualys SSL Labs TLS assessment adapter."""

from __future__ import annotations

from typing import Any

from repwatch.adapters.base import VerdictAdapter
from repwatch.core.constants import DEFAULT_ADAPTER_TIMEOUT, SSLLABS_ENDPOINT, Source
from repwatch.domain.normalizer import try_normalize


class SslLabsAdapter(VerdictAdapter):
    """Fetch the (cached) SSL Labs assessment for the target's host.

    The v4 API identifies callers by a registered e-mail address sent in
    the ``email`` header.  A new assessment takes minutes, so the adapter
    asks for cached results and records whatever status comes back.
    """

    source = Source.SSLLABS

    def __init__(
        self,
        email: str,
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
        endpoint: str = SSLLABS_ENDPOINT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._email = email
        self.endpoint = endpoint

    def is_configured(self) -> bool:
        return bool(self._email)

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        host = try_normalize(target_url) or target_url
        async with self._client() as client:
            resp = await client.get(
                self.endpoint,
                params={"host": host, "fromCache": "on", "all": "done"},
                headers={"email": self._email},
            )
        return self._check_response(resp)
