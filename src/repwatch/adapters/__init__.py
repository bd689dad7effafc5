# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reputation source adapters."""

from repwatch.adapters.base import (
    AdapterError,
    MissingCredentialError,
    NetworkError,
    UpstreamHTTPError,
    VerdictAdapter,
)
from repwatch.adapters.crtsh import CrtShAdapter
from repwatch.adapters.ipqs import IpqsAdapter
from repwatch.adapters.registry import build_adapters
from repwatch.adapters.safebrowsing import SafeBrowsingAdapter
from repwatch.adapters.ssllabs import SslLabsAdapter
from repwatch.adapters.virustotal import VirusTotalAdapter

__all__ = [
    "AdapterError",
    "CrtShAdapter",
    "IpqsAdapter",
    "MissingCredentialError",
    "NetworkError",
    "SafeBrowsingAdapter",
    "SslLabsAdapter",
    "UpstreamHTTPError",
    "VerdictAdapter",
    "VirusTotalAdapter",
    "build_adapters",
]
