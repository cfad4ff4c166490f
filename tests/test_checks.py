import pytest

from fakes import BrokenTLS, FakeRegistration, FakeSafeBrowsing, FakeTLS
from trustcheck.checks.base import CheckContext
from trustcheck.checks.exchange import ExchangeCheck
from trustcheck.checks.registry import build_checks
from trustcheck.checks.safe_browsing import SafeBrowsingCheck
from trustcheck.checks.ssl import SSLCheck
from trustcheck.checks.suspicious_domain import SuspiciousDomainCheck
from trustcheck.checks.types import RequestType, Stage
from trustcheck.checks.typosquatting import TyposquattingCheck
from trustcheck.checks.user_reports import UserReportsCheck
from trustcheck.checks.whois import WhoisCheck
from trustcheck.errors import SourceError, StoreError
from trustcheck.models import ExchangeRecord, RiskLevel, UserReport
from trustcheck.sources.safe_browsing import GoogleSafeBrowsingClient
from trustcheck.sources.stores import ExchangeRegistry, InMemoryBlacklistStore, InMemoryUserReportStore


def ctx(domain, request_type=RequestType.GENERAL):
    return CheckContext(domain=domain.lower(), cleaned=domain, request_type=request_type)


class TestWhoisCheck:

    def test_established_domain(self):
        result = WhoisCheck(FakeRegistration(age_days=3650)).run(ctx("shop.example.com"))
        assert result.score == 100
        assert result.passed is True
        assert result.details["domain"] == "example.com"

    def test_young_domain(self):
        result = WhoisCheck(FakeRegistration(age_days=10, statuses=())).run(ctx("new.example"))
        assert result.score == 38
        assert result.passed is False
        assert result.risk_level == RiskLevel.MEDIUM

    def test_source_failure(self):
        result = WhoisCheck(FakeRegistration(error=SourceError("rdap down"))).run(ctx("example.com"))
        assert result.available is False

    def test_disabled(self):
        assert WhoisCheck(None).run(ctx("example.com")).score is None


class TestSSLCheck:

    def test_valid(self):
        result = SSLCheck(FakeTLS(handshake_seconds=0.1)).run(ctx("example.com"))
        assert result.score == 80
        assert result.details["grade"] == "B+"
        assert result.message == "Valid SSL certificate (Test CA)"

    def test_no_ssl(self):
        result = SSLCheck(FakeTLS(has_ssl=False)).run(ctx("example.com"))
        assert result.score == 0
        assert result.message == "No SSL certificate found - Site is not secure"

    def test_invalid(self):
        result = SSLCheck(FakeTLS(valid=False)).run(ctx("example.com"))
        assert result.score == 0
        assert result.passed is False

    def test_probe_failure(self):
        assert SSLCheck(BrokenTLS()).run(ctx("example.com")).available is False


class TestSafeBrowsingCheck:

    def test_threats(self):
        result = SafeBrowsingCheck(FakeSafeBrowsing(["MALWARE"])).run(ctx("example.com"))
        assert result.score == 0
        assert result.risk_level == RiskLevel.HIGH

    def test_no_key(self):
        check = SafeBrowsingCheck(GoogleSafeBrowsingClient(api_key=""))
        assert check.run(ctx("example.com")).available is False


class TestUserReportsCheck:

    def test_reports_lower_score(self):
        store = InMemoryUserReportStore(UserReport("scam.io", "scam") for _ in range(3))
        result = UserReportsCheck(store).run(ctx("scam.io"))
        assert result.score == 70
        assert result.details["report_count"] == 3
        assert result.risk_level == RiskLevel.MEDIUM

    def test_no_reports(self):
        result = UserReportsCheck(InMemoryUserReportStore()).run(ctx("clean.io"))
        assert result.score == 100
        assert result.passed is True

    def test_store_failure(self):
        class Broken(InMemoryUserReportStore):
            def recent(self, domain, limit=10):
                raise StoreError("down")

        assert UserReportsCheck(Broken()).run(ctx("clean.io")).available is False


class TestHeuristicChecks:

    def test_typosquatting_keeps_case(self, rules):
        result = TyposquattingCheck(rules.typosquatting).run(ctx("paypaI.com"))
        assert result.passed is False
        assert result.message.endswith("- Official: paypal.com")

    def test_typosquatting_uses_registry(self, rules):
        registry = ExchangeRegistry([ExchangeRecord(id="deribit", name="Deribit", url="https://www.deribit.com/")])
        result = TyposquattingCheck(rules.typosquatting, registry).run(ctx("deribt.com"))
        assert result.passed is False
        assert result.details["official_url"] == "deribit.com"

    def test_typosquatting_registry_failure(self, rules):
        class Broken(ExchangeRegistry):
            def domains(self):
                raise StoreError("down")

        result = TyposquattingCheck(rules.typosquatting, Broken()).run(ctx("binanse.com"))
        assert result.passed is False

    def test_ruleset_follows_request_type(self, rules):
        check = SuspiciousDomainCheck({rt.value: rules.ruleset_for(rt.value) for rt in RequestType})
        assert check.run(ctx("freestuff.com")).score == 75
        assert check.run(ctx("freestuff.com", RequestType.CRYPTO)).score == 100


class TestRegistry:

    def test_gate_order_and_detectors(self, rules, exchanges):
        gates, detectors = build_checks(rules, InMemoryBlacklistStore(), exchanges, InMemoryUserReportStore())
        assert [g.name for g in gates] == ["malicious_site", "exchange"]
        assert all(g.stage == Stage.GATE for g in gates)
        assert [d.name for d in detectors] == [
            "user_reports", "whois", "ssl", "safe_browsing", "typosquatting", "suspicious_domain",
        ]
        assert {d.name: d.weight for d in detectors}["ssl"] == pytest.approx(0.15)

    def test_exchange_gate_only_for_crypto(self, exchanges):
        check = ExchangeCheck(exchanges)
        assert check.applies_to(RequestType.CRYPTO) is True
        assert check.applies_to(RequestType.GENERAL) is False
