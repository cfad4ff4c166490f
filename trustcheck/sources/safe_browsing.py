import logging
from dataclasses import dataclass, field
from typing import List

import requests

from trustcheck.cache import get_cache, set_cache
from trustcheck.config import GOOGLE_SAFE_BROWSING_API_KEY, REQUEST_TIMEOUT
from trustcheck.errors import SourceError

logger = logging.getLogger(__name__)

SAFE_BROWSING_URL = "https://safebrowsing.googleapis.com/v4/threatMatches:find"
THREAT_TYPES = ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE", "POTENTIALLY_HARMFUL_APPLICATION"]


@dataclass(frozen=True)
class SafeBrowsingVerdict:
    safe: bool
    threats: List[str] = field(default_factory=list)


class SafeBrowsingClient:

    configured = True

    def lookup(self, domain: str) -> SafeBrowsingVerdict:
        raise NotImplementedError()


class GoogleSafeBrowsingClient(SafeBrowsingClient):

    def __init__(self, api_key: str = GOOGLE_SAFE_BROWSING_API_KEY, timeout: float = REQUEST_TIMEOUT,
                 cache_ttl: int = 3600, session=None):
        self.api_key = api_key
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.session = session or requests

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def lookup(self, domain: str) -> SafeBrowsingVerdict:
        if not self.api_key:
            raise SourceError("Safe Browsing API key not configured")

        cache_key = f"gsb:{domain}"
        if cached := get_cache(cache_key):
            return cached

        body = {
            "client": {"clientId": "trustcheck", "clientVersion": "1.0.0"},
            "threatInfo": {
                "threatTypes": THREAT_TYPES,
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": f"http://{domain}/"}, {"url": f"https://{domain}/"}],
            },
        }

        try:
            resp = self.session.post(
                SAFE_BROWSING_URL, params={"key": self.api_key}, json=body, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise SourceError(f"Safe Browsing request failed: {e}") from e

        if resp.status_code != 200:
            raise SourceError(f"Safe Browsing HTTP {resp.status_code}")

        try:
            matches = resp.json().get("matches", [])
        except ValueError as e:
            raise SourceError(f"Safe Browsing returned invalid JSON: {e}") from e

        threats = sorted({m.get("threatType", "UNKNOWN") for m in matches})
        verdict = SafeBrowsingVerdict(safe=not threats, threats=threats)

        set_cache(cache_key, verdict, expire=self.cache_ttl)
        return verdict
