"""Session cookie handling."""

from __future__ import annotations

from http.cookiejar import Cookie, CookieJar, DefaultCookiePolicy
from typing import Any, Optional

import requests
import tldextract

# Bundled suffix snapshot only, never fetched over the network.
_EXTRACT = tldextract.TLDExtract(
    cache_dir=None,
    suffix_list_urls=(),
    include_psl_private_domains=True,
)


def is_public_suffix(domain: str) -> bool:
    """Return True when ``domain`` is a public suffix such as ``com`` or ``co.uk``."""
    host = domain.lstrip(".").lower()
    if not host:
        return True
    parts = _EXTRACT(host)
    return not parts.domain and bool(parts.suffix)


class PublicSuffixCookiePolicy(DefaultCookiePolicy):
    """Cookie policy that refuses cookies scoped to a bare public suffix."""

    def set_ok_domain(self, cookie: Cookie, request: Any) -> bool:
        if cookie.domain_specified and is_public_suffix(cookie.domain):
            return False
        return super().set_ok_domain(cookie, request)


def new_session() -> requests.Session:
    """Build a session whose cookie jar applies the public suffix policy."""
    session = requests.Session()
    session.cookies.set_policy(PublicSuffixCookiePolicy())
    return session


def cookie_names(jar: CookieJar, set_by: Optional[CookieJar] = None) -> list[str]:
    """Sorted cookie names in ``jar``.

    With ``set_by``, only cookies whose name and value also appear there are
    counted, e.g. the cookies a single response managed to store.
    """
    if set_by is None:
        return sorted({cookie.name for cookie in jar})
    offered = {(cookie.name, cookie.value) for cookie in set_by}
    return sorted({cookie.name for cookie in jar if (cookie.name, cookie.value) in offered})
