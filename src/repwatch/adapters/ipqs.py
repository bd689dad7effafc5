# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""IPQualityScore malicious URL scanner adapter."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from repwatch.adapters.base import MissingCredentialError, UpstreamHTTPError, VerdictAdapter
from repwatch.core.constants import (
    DEFAULT_ADAPTER_TIMEOUT,
    IPQS_MAX_STRICTNESS,
    IPQS_MIN_STRICTNESS,
    IPQS_URL_ENDPOINT,
    Source,
)


def clamp_strictness(value: Any) -> int:
    """Coerce *value* to an IPQS strictness level, defaulting to 0."""
    try:
        level = int(value)
    except (TypeError, ValueError):
        level = 0
    return max(IPQS_MIN_STRICTNESS, min(IPQS_MAX_STRICTNESS, level))


class IpqsAdapter(VerdictAdapter):
    """Query IPQS for a risk score and threat flags.

    IPQS answers 200 even on failure and reports problems in the body via
    ``success: false``; key problems are surfaced as credential errors.
    """

    source = Source.IPQS

    def __init__(
        self,
        api_key: str,
        strictness: int = 0,
        timeout: float = DEFAULT_ADAPTER_TIMEOUT,
        endpoint: str = IPQS_URL_ENDPOINT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._api_key = api_key
        self.strictness = clamp_strictness(strictness)
        self.endpoint = endpoint.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self, target_url: str, **options: Any) -> Any:
        strictness = clamp_strictness(options.get("strictness", self.strictness))
        encoded = quote(target_url, safe="")

        async with self._client() as client:
            resp = await client.get(
                f"{self.endpoint}/{self._api_key}/{encoded}",
                params={"strictness": strictness},
            )

        data = self._check_response(resp)
        if not isinstance(data, dict):
            raise UpstreamHTTPError(
                "IPQS returned an unexpected body",
                source=self.source,
                status=resp.status_code,
                body=data,
            )
        if data.get("success") is False:
            message = str(data.get("message") or "IPQS request failed")
            if "key" in message.lower():
                raise MissingCredentialError(message, source=self.source)
            raise UpstreamHTTPError(
                message, source=self.source, status=resp.status_code, body=data
            )
        return data
