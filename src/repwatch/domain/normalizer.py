# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Reduce arbitrary URL or hostname input to a canonical domain key.

The key is the lowercase ASCII hostname of the input: scheme, credentials,
port, path, query and fragment are all discarded.  Inputs without a scheme
are parsed as if they had ``https://`` in front, so ``example.com`` and
``https://example.com/login`` map to the same key.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from urllib.parse import urlsplit

from repwatch.core.constants import DEFAULT_SCHEME
from repwatch.core.exceptions import NormalizationError

logger = logging.getLogger("repwatch.domain.normalizer")

# One DNS label after IDNA encoding.  Underscores are tolerated because
# they occur in real-world hostnames even though RFC 952 forbids them.
_LABEL_RE = re.compile(r"^[a-z0-9_](?:[a-z0-9_-]{0,61}[a-z0-9_])?$")


def _is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _to_ascii(host: str) -> str:
    """Encode an IDN hostname to its punycode form."""
    if host.isascii():
        return host
    try:
        return host.encode("idna").decode("ascii")
    except UnicodeError as exc:
        raise NormalizationError(f"Invalid internationalized hostname: {host!r}") from exc


def normalize(value: str) -> str:
    """Return the canonical domain key for *value*.

    Raises:
        NormalizationError: if *value* cannot be parsed into a URL with a
            usable hostname.
    """
    if not isinstance(value, str) or not value.strip():
        raise NormalizationError("Empty input cannot be normalized to a domain")

    candidate = value.strip()
    if "://" not in candidate:
        candidate = f"{DEFAULT_SCHEME}://{candidate}"

    try:
        parts = urlsplit(candidate)
        host = parts.hostname
        # Accessing .port validates it; urllib raises ValueError when out of range
        parts.port  # noqa: B018
    except ValueError as exc:
        raise NormalizationError(f"Unparseable URL: {value!r}") from exc

    if not host:
        raise NormalizationError(f"No hostname in {value!r}")

    host = host.rstrip(".")
    if _is_ip_address(host):
        return str(ipaddress.ip_address(host))

    host = _to_ascii(host).lower()
    labels = host.split(".")
    if len(host) > 253 or not all(_LABEL_RE.match(label) for label in labels):
        raise NormalizationError(f"Invalid hostname in {value!r}")

    return host


def try_normalize(value: str) -> str | None:
    """Like :func:`normalize` but returns ``None`` instead of raising."""
    try:
        return normalize(value)
    except NormalizationError:
        logger.debug("Invalid URL: %s", value)
        return None
