"""Translate an inbound Cookie header into browser cookie records."""

import logging

from docprint.domain.entities import CookieRecord

logger = logging.getLogger(__name__)

HOST_PREFIX = "__Host-"
SECURE_PREFIX = "__Secure-"


def translate_cookies(
    cookie_header: str,
    host: str,
    secure: bool,
    base_url: str,
) -> list[CookieRecord]:
    """Parse ``cookie_header`` into one CookieRecord per ``name=value`` pair.

    Prefix rules, checked in order:
        ``__Host-``   → scoped to ``base_url``, path ``/``, secure, no domain
        ``__Secure-`` → scoped to ``base_url``, path ``/``, secure
        otherwise     → scoped to ``host``, path ``/``, secure = ``secure``

    Pairs without ``=`` or with an empty name are skipped. Never raises.
    """
    domain = host.split(":")[0]
    records: list[CookieRecord] = []

    for raw in (cookie_header or "").split(";"):
        pair = raw.strip()
        if not pair or "=" not in pair:
            continue

        name, _, value = pair.partition("=")
        name = name.strip()
        if not name:
            continue

        if name.startswith(HOST_PREFIX) or name.startswith(SECURE_PREFIX):
            records.append(CookieRecord(name=name, value=value, url=base_url, secure=True))
        else:
            records.append(CookieRecord(name=name, value=value, domain=domain, secure=secure))

    logger.debug("Translated %d cookie(s) for %s", len(records), domain)
    return records
