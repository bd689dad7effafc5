# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Build the set of verdict adapters from application settings."""

from __future__ import annotations

import logging

from repwatch.adapters.base import VerdictAdapter
from repwatch.adapters.crtsh import CrtShAdapter
from repwatch.adapters.ipqs import IpqsAdapter
from repwatch.adapters.safebrowsing import SafeBrowsingAdapter
from repwatch.adapters.ssllabs import SslLabsAdapter
from repwatch.adapters.virustotal import VirusTotalAdapter
from repwatch.core.config import Settings
from repwatch.core.constants import Source

logger = logging.getLogger("repwatch.adapters.registry")


def build_adapters(settings: Settings) -> dict[str, VerdictAdapter]:
    """Create one adapter per source listed in ``settings.enabled_sources``.

    Adapters are registered even without credentials so that a request
    for them fails with a credential error rather than "unknown source".
    """
    timeout = settings.adapter_timeout
    adapters: dict[str, VerdictAdapter] = {}

    for name in settings.enabled_sources:
        if name == Source.IPQS:
            adapters[name] = IpqsAdapter(
                settings.ipqs_key, strictness=settings.ipqs_strictness, timeout=timeout
            )
        elif name == Source.VIRUSTOTAL:
            adapters[name] = VirusTotalAdapter(settings.vt_key, timeout=timeout)
        elif name == Source.GOOGLE:
            adapters[name] = SafeBrowsingAdapter(settings.google_key, timeout=timeout)
        elif name == Source.CRT:
            adapters[name] = CrtShAdapter(timeout=timeout)
        elif name == Source.SSLLABS:
            adapters[name] = SslLabsAdapter(settings.ssllabs_email, timeout=timeout)
        else:
            logger.warning("Reputation source '%s' is enabled but unknown", name)

    for name, adapter in adapters.items():
        if not adapter.is_configured():
            logger.warning("Reputation source '%s' has no credentials configured", name)

    return adapters
