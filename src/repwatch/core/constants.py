# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, provider endpoints, and default constants."""

from enum import StrEnum


class Source(StrEnum):
    IPQS = "IPQS"
    VIRUSTOTAL = "VirusTotal"
    GOOGLE = "Google"
    CRT = "CRT"
    SSLLABS = "SSLLabs"


class ScorePolicyName(StrEnum):
    LAST_WRITER = "last_writer"
    MAX_RISK = "max_risk"


DEFAULT_SCHEME = "https"
DEFAULT_ADAPTER_TIMEOUT = 10.0

IPQS_URL_ENDPOINT = "https://ipqualityscore.com/api/json/url"
IPQS_MIN_STRICTNESS = 0
IPQS_MAX_STRICTNESS = 2

VIRUSTOTAL_API = "https://www.virustotal.com/api/v3"

SAFE_BROWSING_ENDPOINT = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
SAFE_BROWSING_THREAT_TYPES: tuple[str, ...] = (
    "MALWARE",
    "SOCIAL_ENGINEERING",
    "UNWANTED_SOFTWARE",
    "POTENTIALLY_HARMFUL_APPLICATION",
)

CRTSH_ENDPOINT = "https://crt.sh/"
CRT_MAX_CERTIFICATES = 5

SSLLABS_ENDPOINT = "https://api.ssllabs.com/api/v4/analyze"

# Short names accepted by the CLI and the HTTP routes
SOURCE_ALIASES: dict[str, str] = {
    "ipqs": Source.IPQS,
    "vt": Source.VIRUSTOTAL,
    "virustotal": Source.VIRUSTOTAL,
    "google": Source.GOOGLE,
    "safebrowsing": Source.GOOGLE,
    "crt": Source.CRT,
    "ssl": Source.SSLLABS,
    "ssllabs": Source.SSLLABS,
}
