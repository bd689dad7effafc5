# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""VirusTotal URL analysis adapter."""

from __future__ import annotations

from typing import Any

from repwatch.adapters.base import UpstreamHTTPError, VerdictAdapter
from repwatch.core.constants import DEFAULT_ADAPTER_TIMEOUT, VIRUSTOTAL_API, Source


class VirusTotalAdapter(VerdictAdapter):
    """Submit a URL for analysis, then fetch the analysis object.

    Returns the ``GET /analyses/{id}`` response.  A freshly submitted URL
    may still be ``queued``; the stored report carries that status.
    """

    source = Source.VIRUSTOTAL

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
        base_url: str = VIRUSTOTAL_API,
    ) -> None:
        super().__init__(timeout=timeout)
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        headers = {"accept": "application/json", "x-apikey": self._api_key}

        async with self._client() as client:
            submit = await client.post(
                f"{self.base_url}/urls", data={"url": target_url}, headers=headers
            )
            submitted = self._check_response(submit)

            try:
                analysis_id = submitted["data"]["id"]
            except (KeyError, TypeError) as exc:
                raise UpstreamHTTPError(
                    "VirusTotal submission response has no analysis id",
                    source=self.source,
                    status=submit.status_code,
                    body=submitted,
                ) from exc

            analysis = await client.get(
                f"{self.base_url}/analyses/{analysis_id}", headers=headers
            )

        return self._check_response(analysis)
