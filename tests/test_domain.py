import pytest

from trustcheck.domain import clean_domain, domain_label, normalize_domain, registered_domain, split_domain
from trustcheck.errors import InvalidDomainError


class TestCleanDomain:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("https://www.Binance.com/en/login?x=1#top", "Binance.com"),
            ("http://binance.com:8443", "binance.com"),
            ("binance.com.", "binance.com"),
            ("  www.upbit.com  ", "upbit.com"),
            ("user@binance.com", "binance.com"),
            ("ftp://files.example.org/path", "files.example.org"),
        ],
    )
    def test_strips_decoration(self, raw, expected):
        assert clean_domain(raw) == expected

    def test_case_preserved(self):
        """Capital I must survive for the visual checks."""
        assert clean_domain("paypaI.com") == "paypaI.com"

    @pytest.mark.parametrize("raw", [None, "", "   ", "http://", "localhost", "bad domain.com", "a..com"])
    def test_rejects_malformed(self, raw):
        with pytest.raises(InvalidDomainError):
            clean_domain(raw)

    def test_invalid_domain_is_value_error(self):
        with pytest.raises(ValueError):
            clean_domain("")


class TestDomainParts:

    def test_normalize_lowercases(self):
        assert normalize_domain("HTTPS://WWW.BINANCE.COM/") == "binance.com"

    def test_split_multi_part_suffix(self):
        assert split_domain("sub.example.co.uk") == ("sub.example", "uk")

    def test_split_simple(self):
        assert split_domain("free-coin.tk") == ("free-coin", "tk")

    def test_registered_domain(self):
        assert registered_domain("a.b.example.co.uk") == "example.co.uk"
        assert registered_domain("binance.com.evil.net") == "evil.net"

    def test_domain_label(self):
        assert domain_label("www.Gate.io") == "gate"
        assert domain_label("kuco.in") == "kuco"
        assert domain_label("accounts.upbit.co.kr") == "upbit"
