"""Upload policy: blacklist and already-uploaded checks.

Both checks run before any network access.  A reference that matches
either one passes through the pipeline unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from imguploader.config import UploaderConfig
from imguploader.models import OutcomeStatus

_SCHEME_RE = re.compile(r"^https?://")


def _strip_scheme(value: str) -> str:
    return _SCHEME_RE.sub("", value, count=1)


def is_blacklisted(url: str, domains: Iterable[str]) -> bool:
    """Return ``True`` if *url* starts with any of the blacklisted *domains*.

    Scheme prefixes are ignored and the comparison is case-insensitive, so
    ``example.com`` also matches ``https://Example.com:8080/a.png``.  Blank
    entries never match.  Malformed input is treated as not blacklisted.
    """
    try:
        stripped_url = _strip_scheme(url.lower())
        for domain in domains:
            stripped_domain = _strip_scheme(domain.lower().strip())
            if stripped_domain and stripped_url.startswith(stripped_domain):
                return True
    except (AttributeError, TypeError):
        return False
    return False


def api_origin(api_url: str) -> str | None:
    """Return ``scheme://host[:port]`` for *api_url*, or ``None`` if it has none."""
    try:
        parts = urlsplit(api_url.strip())
        # Accessing .port validates it and raises ValueError when out of range.
        _ = parts.port
    except (AttributeError, ValueError):
        return None
    if not parts.scheme or not parts.netloc:
        return None
    netloc = parts.netloc.rpartition("@")[2].lower()
    default_port = {"http": ":80", "https": ":443"}.get(parts.scheme.lower())
    if default_port and netloc.endswith(default_port):
        netloc = netloc[: -len(default_port)]
    return f"{parts.scheme.lower()}://{netloc}"


def is_already_uploaded(url: str, api_url: str) -> bool:
    """Return ``True`` if *url* already lives on the upload endpoint's origin."""
    origin = api_origin(api_url)
    if origin is None:
        return False
    return url.startswith(origin)


def classify(url: str, config: UploaderConfig) -> OutcomeStatus | None:
    """Apply the policy checks in order.

    Returns :attr:`OutcomeStatus.BLACKLISTED`, :attr:`OutcomeStatus.SKIPPED`,
    or ``None`` when the image is eligible for upload.
    """
    if is_blacklisted(url, config.blacklist_domains):
        return OutcomeStatus.BLACKLISTED
    if is_already_uploaded(url, config.api_url):
        return OutcomeStatus.SKIPPED
    return None
