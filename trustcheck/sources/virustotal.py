import logging
from dataclasses import dataclass
from typing import Optional

import requests

from trustcheck.cache import get_cache, set_cache
from trustcheck.config import REQUEST_TIMEOUT, VIRUSTOTAL_API_KEY
from trustcheck.errors import SourceError

logger = logging.getLogger(__name__)

VT_DOMAIN_URL = "https://www.virustotal.com/api/v3/domains/{domain}"
VT_GUI_URL = "https://www.virustotal.com/gui/domain/{domain}"


@dataclass(frozen=True)
class ReputationStats:
    malicious: int = 0
    suspicious: int = 0
    harmless: int = 0
    undetected: int = 0
    last_modification: Optional[int] = None

    @property
    def total(self) -> int:
        return self.malicious + self.suspicious + self.harmless + self.undetected


class ReputationFeed:
    """Vendor reputation lookup. query() returns None when the domain is unknown."""

    configured = True

    def query(self, domain: str) -> Optional[ReputationStats]:
        raise NotImplementedError()


class VirusTotalFeed(ReputationFeed):

    def __init__(self, api_key: str = VIRUSTOTAL_API_KEY, timeout: float = REQUEST_TIMEOUT,
                 cache_ttl: int = 3600, session=None):
        self.api_key = api_key
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.session = session or requests

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def query(self, domain: str) -> Optional[ReputationStats]:
        if not self.api_key:
            return None

        cache_key = f"vt:{domain}"
        if cached := get_cache(cache_key):
            return cached

        try:
            resp = self.session.get(
                VT_DOMAIN_URL.format(domain=domain),
                headers={"x-apikey": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SourceError(f"VirusTotal request failed: {e}") from e

        if resp.status_code == 404:
            return None
        if resp.status_code == 429:
            raise SourceError("VirusTotal rate limit exceeded")
        if resp.status_code != 200:
            raise SourceError(f"VirusTotal HTTP {resp.status_code}")

        try:
            attributes = resp.json().get("data", {}).get("attributes", {})
        except ValueError as e:
            raise SourceError(f"VirusTotal returned invalid JSON: {e}") from e

        stats = attributes.get("last_analysis_stats") or {}
        result = ReputationStats(
            malicious=int(stats.get("malicious", 0)),
            suspicious=int(stats.get("suspicious", 0)),
            harmless=int(stats.get("harmless", 0)),
            undetected=int(stats.get("undetected", 0)),
            last_modification=attributes.get("last_modification_date"),
        )
        logger.debug("VirusTotal stats for %s: %s", domain, result)

        set_cache(cache_key, result, expire=self.cache_ttl)
        return result
