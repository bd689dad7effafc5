# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""crt.sh certificate transparency adapter."""

from __future__ import annotations

from typing import Any

from repwatch.adapters.base import UpstreamHTTPError, VerdictAdapter
from repwatch.core.constants import CRTSH_ENDPOINT, DEFAULT_ADAPTER_TIMEOUT, Source
from repwatch.domain.normalizer import try_normalize


class CrtShAdapter(VerdictAdapter):
    """List certificates logged for the target's hostname.

    crt.sh needs no credentials; a 403 from it is throttling, not a key
    problem.
    """

    source = Source.CRT
    credential_statuses = frozenset()

    def __init__(
        self,
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
        endpoint: str = CRTSH_ENDPOINT,
    ) -> None:
        super().__init__(timeout=timeout)
        self.endpoint = endpoint

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        query = try_normalize(target_url) or target_url
        async with self._client() as client:
            resp = await client.get(self.endpoint, params={"q": query, "output": "json"})

        data = self._check_response(resp)
        if not isinstance(data, list):
            raise UpstreamHTTPError(
                "crt.sh returned an unexpected body",
                source=self.source,
                status=resp.status_code,
                body=data,
            )
        return data
