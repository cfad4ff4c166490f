from functools import lru_cache
from typing import Any, Dict

from trustcheck.config import (
    BLACKLIST_DB,
    DETECTOR_TIMEOUT,
    EXCHANGES_FILE,
    REPORTS_DB,
    RESULT_CACHE_TTL,
    WHITELIST_DB,
)
from trustcheck.rules import load_rules
from trustcheck.scoring.engine import Validator
from trustcheck.sources.safe_browsing import GoogleSafeBrowsingClient
from trustcheck.sources.stores import (
    DiskBlacklistStore,
    DiskUserReportStore,
    DiskWhitelistStore,
    ExchangeRegistry,
    InMemoryBlacklistStore,
    InMemoryUserReportStore,
    InMemoryWhitelistStore,
)
from trustcheck.sources.tls import SocketTLSProbe
from trustcheck.sources.virustotal import VirusTotalFeed
from trustcheck.sources.whois import RdapWhoisSource


def build_validator(offline: bool = False) -> Validator:
    """
    Validator wired from settings.

    offline: no network sources and no disk stores, only the lexical
    detectors and the bundled exchange registry.
    """
    exchanges = ExchangeRegistry.from_yaml(EXCHANGES_FILE)

    if offline:
        return Validator(
            rules=load_rules(),
            blacklist=InMemoryBlacklistStore(),
            exchanges=exchanges,
            reports=InMemoryUserReportStore(),
            whitelist=InMemoryWhitelistStore(),
            detector_timeout=DETECTOR_TIMEOUT,
            cache_ttl=0,
        )

    return Validator(
        rules=load_rules(),
        blacklist=DiskBlacklistStore(BLACKLIST_DB),
        exchanges=exchanges,
        reports=DiskUserReportStore(REPORTS_DB),
        whitelist=DiskWhitelistStore(WHITELIST_DB),
        reputation_feed=VirusTotalFeed(),
        registration=RdapWhoisSource(),
        tls=SocketTLSProbe(),
        safe_browsing=GoogleSafeBrowsingClient(),
        detector_timeout=DETECTOR_TIMEOUT,
        cache_ttl=RESULT_CACHE_TTL,
    )


@lru_cache(maxsize=2)
def default_validator(offline: bool = False) -> Validator:
    return build_validator(offline)


def analyze_domain(domain: str, request_type: str = "general", offline: bool = False) -> Dict[str, Any]:
    return default_validator(offline).validate(domain, request_type).to_dict()
