from typing import List, Optional, Tuple

from trustcheck.checks.base import Check
from trustcheck.checks.blacklist import BlacklistCheck
from trustcheck.checks.exchange import ExchangeCheck
from trustcheck.checks.gate import Gate
from trustcheck.checks.safe_browsing import SafeBrowsingCheck
from trustcheck.checks.ssl import SSLCheck
from trustcheck.checks.suspicious_domain import SuspiciousDomainCheck
from trustcheck.checks.types import RequestType
from trustcheck.checks.typosquatting import TyposquattingCheck
from trustcheck.checks.user_reports import UserReportsCheck
from trustcheck.checks.whois import WhoisCheck
from trustcheck.rules import Rules
from trustcheck.sources.safe_browsing import SafeBrowsingClient
from trustcheck.sources.stores import BlacklistStore, ExchangeRegistry, UserReportStore
from trustcheck.sources.tls import TLSProbe
from trustcheck.sources.virustotal import ReputationFeed
from trustcheck.sources.whois import RegistrationSource


def build_checks(
    rules: Rules,
    blacklist: BlacklistStore,
    exchanges: ExchangeRegistry,
    reports: UserReportStore,
    reputation_feed: Optional[ReputationFeed] = None,
    registration: Optional[RegistrationSource] = None,
    tls: Optional[TLSProbe] = None,
    safe_browsing: Optional[SafeBrowsingClient] = None,
) -> Tuple[List[Gate], List[Check]]:
    """
    Return (gates, detectors). Gates run in list order before the
    detectors; detectors run concurrently.
    """
    w = rules.weights

    gates: List[Gate] = [
        BlacklistCheck(blacklist, reputation_feed, rules.reputation, w.get("malicious_site", 0.25)),
        ExchangeCheck(exchanges, w.get("exchange", 1.0)),
    ]

    rulesets = {rt.value: rules.ruleset_for(rt.value) for rt in RequestType}

    detectors: List[Check] = [
        UserReportsCheck(reports, w.get("user_reports", 0.15)),
        WhoisCheck(registration, w.get("whois", 0.10)),
        SSLCheck(tls, w.get("ssl", 0.15)),
        SafeBrowsingCheck(safe_browsing, w.get("safe_browsing", 0.10)),
        TyposquattingCheck(rules.typosquatting, exchanges, w.get("typosquatting", 0.15)),
        SuspiciousDomainCheck(rulesets, w.get("suspicious_domain", 0.10)),
    ]

    return gates, detectors
