"""
Domain registration lookup.

RDAP is preferred (structured JSON, no rate-limited port 43); python-whois
is the fallback when RDAP has no registration event for the domain.
"""

import datetime
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
import whois

from trustcheck.cache import get_cache, set_cache
from trustcheck.config import REQUEST_TIMEOUT
from trustcheck.errors import SourceError

logger = logging.getLogger(__name__)

RDAP_URL = "https://www.rdap.net/domain/{domain}"
WHOIS_CACHE_TTL = 30 * 24 * 3600


@dataclass(frozen=True)
class RegistrationRecord:
    domain: str
    creation_date: Optional[datetime.datetime] = None
    expiration_date: Optional[datetime.datetime] = None
    registrar: Optional[str] = None
    statuses: Tuple[str, ...] = ()
    source: str = "rdap"

    def age_days(self, now: Optional[datetime.datetime] = None) -> Optional[int]:
        if self.creation_date is None:
            return None
        now = now or datetime.datetime.now(datetime.timezone.utc)
        return max(0, (now - self.creation_date).days)


def _as_utc(value) -> Optional[datetime.datetime]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        try:
            value = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if not isinstance(value, datetime.datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def _as_list(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


class RegistrationSource:

    def lookup(self, domain: str) -> RegistrationRecord:
        raise NotImplementedError()


class RdapWhoisSource(RegistrationSource):

    def __init__(self, timeout: float = REQUEST_TIMEOUT, cache_ttl: int = WHOIS_CACHE_TTL, session=None):
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.session = session or requests

    def rdap_lookup(self, domain: str) -> Optional[RegistrationRecord]:
        try:
            resp = self.session.get(RDAP_URL.format(domain=domain), timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug("RDAP request for %s failed: %s", domain, e)
            return None

        if resp.status_code == 404:
            raise SourceError(f"{domain} is not registered (RDAP 404)")
        if resp.status_code != 200:
            logger.debug("RDAP HTTP %s for %s", resp.status_code, domain)
            return None

        try:
            data = resp.json()
        except ValueError:
            return None

        events = {e.get("eventAction"): e.get("eventDate") for e in data.get("events", [])}
        created = _as_utc(events.get("registration"))
        if created is None:
            return None

        registrar = None
        for entity in data.get("entities", []):
            if "registrar" in entity.get("roles", []):
                vcard = entity.get("vcardArray") or [None, []]
                for entry in vcard[1]:
                    if entry and entry[0] == "fn":
                        registrar = entry[3]
                break

        return RegistrationRecord(
            domain=domain,
            creation_date=created,
            expiration_date=_as_utc(events.get("expiration")),
            registrar=registrar,
            statuses=_as_list(data.get("status")),
            source="rdap",
        )

    def whois_lookup(self, domain: str) -> RegistrationRecord:
        try:
            w = whois.whois(domain)
        except Exception as e:  # noqa: BLE001
            raise SourceError(f"WHOIS lookup failed: {e}") from e

        created = _as_utc(w.get("creation_date"))
        if created is None and not w.get("status"):
            raise SourceError(f"No registration data for {domain}")

        return RegistrationRecord(
            domain=domain,
            creation_date=created,
            expiration_date=_as_utc(w.get("expiration_date")),
            registrar=w.get("registrar"),
            statuses=_as_list(w.get("status")),
            source="whois",
        )

    def lookup(self, domain: str) -> RegistrationRecord:
        cache_key = f"whois:{domain}"
        if cached := get_cache(cache_key):
            return cached

        record = self.rdap_lookup(domain) or self.whois_lookup(domain)

        set_cache(cache_key, record, expire=self.cache_ttl)
        return record
