# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract base class and error types for reputation source adapters."""

from __future__ import annotations

import abc
import logging
from typing import Any

import httpx

from repwatch import __version__
from repwatch.core.constants import DEFAULT_ADAPTER_TIMEOUT

logger = logging.getLogger("repwatch.adapters")

_USER_AGENT = f"repwatch/{__version__}"


class AdapterError(Exception):
    """Base error for reputation source failures."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class MissingCredentialError(AdapterError):
    """The source has no API key configured, or rejected the one it has."""


class UpstreamHTTPError(AdapterError):
    """The provider answered with a non-2xx status or an unusable body."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        status: int | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message, source)
        self.status = status
        self.body = body


class NetworkError(AdapterError):
    """The provider could not be reached or did not answer in time."""


def _response_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text[:500]


class VerdictAdapter(abc.ABC):
    """Base class for all reputation source adapters.

    Each concrete adapter sends the target to its provider and returns the
    provider's raw JSON verdict.  Failures are raised as
    :class:`AdapterError` subclasses; transport failures and timeouts are
    translated to :class:`NetworkError` by :meth:`fetch_verdict`.

    Parameters
    ----------
    timeout:
        Per-request timeout in seconds.
    """

    source: str
    #: Statuses that mean the credential was refused.
    credential_statuses: frozenset[int] = frozenset({401, 403})

    def __init__(self, timeout: float = DEFAULT_ADAPTER_TIMEOUT) -> None:
        self.timeout = timeout

    def is_configured(self) -> bool:
        """Return ``True`` if the adapter has the credentials it needs."""
        return True

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"User-Agent": _USER_AGENT},
        )

    async def fetch_verdict(self, target_url: str, **options: Any) -> Any:
        """Query the provider for *target_url* and return its raw verdict."""
        if not self.is_configured():
            raise MissingCredentialError(
                f"{self.source} API key is not configured", source=self.source
            )
        try:
            return await self._fetch(target_url, **options)
        except httpx.TimeoutException as exc:
            raise NetworkError(
                f"{self.source} request timed out ({self.timeout}s)", source=self.source
            ) from exc
        except httpx.HTTPError as exc:
            logger.debug("%s request failed: %s", self.source, exc)
            raise NetworkError(f"{self.source} request failed: {exc}", source=self.source) from exc

    @abc.abstractmethod
    async def _fetch(self, target_url: str, **options: Any) -> Any:
        """Perform the provider-specific request(s)."""

    def _check_response(self, resp: httpx.Response) -> Any:
        """Return the decoded JSON body or raise a typed error for bad responses."""
        if resp.status_code in self.credential_statuses:
            raise MissingCredentialError(
                f"{self.source} rejected the API key (HTTP {resp.status_code})",
                source=self.source,
            )
        if not resp.is_success:
            raise UpstreamHTTPError(
                f"{self.source} returned status {resp.status_code}",
                source=self.source,
                status=resp.status_code,
                body=_response_body(resp),
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamHTTPError(
                f"{self.source} returned a malformed body",
                source=self.source,
                status=resp.status_code,
                body=resp.text[:500],
            ) from exc
