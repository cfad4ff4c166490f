import pytest

from trustcheck.config import DATA_DIR
from trustcheck.models import BlacklistRecord, ExchangeRecord, UserReport
from trustcheck.sources.stores import (
    DiskBlacklistStore,
    DiskUserReportStore,
    DiskWhitelistStore,
    ExchangeRegistry,
    InMemoryBlacklistStore,
    InMemoryUserReportStore,
    InMemoryWhitelistStore,
    url_host,
)


@pytest.fixture
def record():
    return BlacklistRecord(
        domain="evil-binance.com",
        reason="Phishing kit",
        evidence=("https://example.org/evidence",),
        target_brand="Binance",
    )


class TestBlacklistStores:

    def test_memory_insert_is_idempotent(self, record):
        store = InMemoryBlacklistStore()
        assert store.insert(record) is True
        assert store.insert(record) is False
        assert len(store) == 1

    def test_memory_lookup_is_case_insensitive(self, record):
        store = InMemoryBlacklistStore([record])
        assert store.lookup("EVIL-BINANCE.COM") == record
        assert store.lookup("binance.com") is None

    def test_disk_round_trip(self, tmp_path, record):
        store = DiskBlacklistStore(str(tmp_path / "blacklist"))
        assert store.insert(record) is True
        assert store.insert(record) is False

        reopened = DiskBlacklistStore(str(tmp_path / "blacklist"))
        found = reopened.lookup("evil-binance.com")
        assert found == record
        assert found.evidence == ("https://example.org/evidence",)


class TestWhitelistStores:

    def test_memory_contains(self):
        store = InMemoryWhitelistStore(["Partner.example"])
        assert store.contains("partner.example") is True
        assert store.contains("other.example") is False
        assert store.add("PARTNER.example") is False

    def test_disk_round_trip(self, tmp_path):
        store = DiskWhitelistStore(str(tmp_path / "whitelist"))
        assert store.add("partner.example", reason="audited") is True
        assert store.add("partner.example") is False

        reopened = DiskWhitelistStore(str(tmp_path / "whitelist"))
        assert reopened.contains("Partner.Example") is True
        assert reopened.contains("sub.partner.example") is False


class TestExchangeRegistry:

    def test_host_match(self, exchanges):
        assert exchanges.lookup("binance.com").name == "Binance"

    def test_sub_host_match(self, exchanges):
        assert exchanges.lookup("accounts.binance.com").name == "Binance"

    def test_no_substring_match(self, exchanges):
        """Matching stops at label boundaries."""
        assert exchanges.lookup("fakebinance.com") is None
        assert exchanges.lookup("binance.com.evil.net") is None

    def test_name_lookalikes_are_not_verified(self):
        """Exchanges with a URL are only matched on their host."""
        registry = ExchangeRegistry.from_yaml(DATA_DIR / "exchanges.yaml")
        for domain in ("kuco.in", "upb.it", "byb.it", "cryptocom.exchange"):
            assert registry.lookup(domain) is None, domain

    def test_name_match_without_url(self):
        registry = ExchangeRegistry([ExchangeRecord(id="local", name="Local Ex")])
        assert registry.lookup("localex.com").id == "local"
        assert registry.lookup("www.localex.co.kr").id == "local"
        assert registry.lookup("local.ex") is None
        assert registry.lookup("localex.evil.com") is None

    def test_inactive_ignored(self, exchanges):
        assert exchanges.lookup("deadex.com") is None
        assert "deadex.com" not in exchanges.domains()

    def test_domains(self, exchanges):
        assert exchanges.domains() == ["binance.com", "upbit.com", "gate.io"]

    def test_bundled_registry(self):
        registry = ExchangeRegistry.from_yaml(DATA_DIR / "exchanges.yaml")
        assert registry.lookup("kraken.com").id == "kraken"
        assert "upbit.com" in registry.domains()

    def test_missing_file(self, tmp_path):
        assert ExchangeRegistry.from_yaml(tmp_path / "none.yaml").domains() == []

    def test_url_host(self):
        assert url_host("https://www.Binance.com/en") == "binance.com"
        assert url_host("gate.io") == "gate.io"


class TestUserReportStores:

    def _reports(self):
        return [
            UserReport("scam.io", "phishing", created_at="2024-01-01T00:00:00"),
            UserReport("scam.io", "fraud", created_at="2024-03-01T00:00:00"),
            UserReport("other.io", "fraud", created_at="2024-02-01T00:00:00"),
        ]

    def test_memory_recent_newest_first(self):
        store = InMemoryUserReportStore(self._reports())
        recent = store.recent("SCAM.io")
        assert [r.report_type for r in recent] == ["fraud", "phishing"]
        assert store.count("scam.io") == 2
        assert store.count("nothing.io") == 0

    def test_recent_is_limited(self):
        store = InMemoryUserReportStore(
            UserReport("spam.io", "spam", created_at=f"2024-01-{day:02d}") for day in range(1, 16)
        )
        assert len(store.recent("spam.io")) == 10

    def test_disk_store(self, tmp_path):
        store = DiskUserReportStore(str(tmp_path / "reports"))
        for report in self._reports():
            store.add(report)
        assert [r.report_type for r in store.recent("scam.io")] == ["fraud", "phishing"]
