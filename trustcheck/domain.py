import re
from typing import Tuple

import tldextract

from trustcheck.errors import InvalidDomainError

# Bundled public suffix snapshot only, no HTTP fetch at runtime
_extract = tldextract.TLDExtract(suffix_list_urls=())

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_HOST_RE = re.compile(r"^[^\s/\\?#@:]+$")


def clean_domain(raw: str) -> str:
    """
    Strip scheme, user-info, www., path, query, fragment and port.

    Case is preserved: visual-confusion checks need to tell 'I' from 'l'.
    """
    if raw is None:
        raise InvalidDomainError("Domain is required")

    domain = raw.strip()
    domain = _SCHEME_RE.sub("", domain)
    domain = re.split(r"[/?#]", domain, maxsplit=1)[0]
    domain = domain.rsplit("@", 1)[-1]
    domain = domain.split(":", 1)[0]
    domain = domain.strip(".")
    domain = re.sub(r"^www\.", "", domain, flags=re.IGNORECASE)

    if not domain:
        raise InvalidDomainError(f"No domain found in input: {raw!r}")
    if "." not in domain or not _HOST_RE.match(domain):
        raise InvalidDomainError(f"Malformed domain: {raw!r}")
    if any(not label for label in domain.split(".")):
        raise InvalidDomainError(f"Malformed domain: {raw!r}")

    return domain


def normalize_domain(raw: str) -> str:
    return clean_domain(raw).lower()


def split_domain(domain: str) -> Tuple[str, str]:
    """
    Return (name, tld) where name is everything left of the public suffix.

    Unknown suffixes fall back to the last label.
    """
    ext = _extract(domain)
    if ext.suffix:
        name = ".".join(part for part in (ext.subdomain, ext.domain) if part)
        return name, ext.suffix.rsplit(".", 1)[-1]

    name, _, tld = domain.rpartition(".")
    return name, tld


def registered_domain(domain: str) -> str:
    """Root domain used for WHOIS/RDAP lookups (sub.example.co.uk -> example.co.uk)."""
    ext = _extract(domain)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return domain


def domain_label(domain: str) -> str:
    """Registrable label without subdomains or suffix (www.gate.io -> gate)."""
    return _extract(domain).domain.lower()
