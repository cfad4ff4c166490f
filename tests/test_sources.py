import datetime
import socket
import ssl

import pytest
import requests

from fakes import FakeResponse, FakeSession
from trustcheck.errors import SourceError
from trustcheck.sources import tls as tls_module
from trustcheck.sources import whois as whois_module
from trustcheck.sources.safe_browsing import GoogleSafeBrowsingClient
from trustcheck.sources.tls import SocketTLSProbe
from trustcheck.sources.virustotal import VirusTotalFeed
from trustcheck.sources.whois import RdapWhoisSource

# Each test uses its own domain: results are cached for the whole session.


class TestVirusTotalFeed:

    def test_parses_stats(self):
        payload = {
            "data": {
                "attributes": {
                    "last_analysis_stats": {"malicious": 4, "suspicious": 1, "harmless": 60, "undetected": 5},
                    "last_modification_date": 1700000000,
                }
            }
        }
        session = FakeSession(FakeResponse(200, payload))
        stats = VirusTotalFeed(api_key="k", session=session).query("vt-stats.example")

        assert (stats.malicious, stats.suspicious, stats.total) == (4, 1, 70)
        method, url, kwargs = session.calls[0]
        assert url == "https://www.virustotal.com/api/v3/domains/vt-stats.example"
        assert kwargs["headers"] == {"x-apikey": "k"}

    def test_result_is_cached(self):
        payload = {"data": {"attributes": {"last_analysis_stats": {"harmless": 1}}}}
        session = FakeSession(FakeResponse(200, payload))
        feed = VirusTotalFeed(api_key="k", session=session)
        feed.query("vt-cache.example")
        feed.query("vt-cache.example")
        assert len(session.calls) == 1

    def test_unknown_domain(self):
        feed = VirusTotalFeed(api_key="k", session=FakeSession(FakeResponse(404)))
        assert feed.query("vt-unknown.example") is None

    @pytest.mark.parametrize("status", [429, 500])
    def test_http_errors(self, status):
        feed = VirusTotalFeed(api_key="k", session=FakeSession(FakeResponse(status)))
        with pytest.raises(SourceError):
            feed.query(f"vt-{status}.example")

    def test_network_error(self):
        feed = VirusTotalFeed(api_key="k", session=FakeSession(error=requests.ConnectionError("down")))
        with pytest.raises(SourceError):
            feed.query("vt-down.example")

    def test_no_key(self):
        session = FakeSession()
        feed = VirusTotalFeed(api_key="", session=session)
        assert feed.configured is False
        assert feed.query("vt-nokey.example") is None
        assert session.calls == []


class TestRdapWhoisSource:

    RDAP = {
        "events": [
            {"eventAction": "registration", "eventDate": "2015-03-26T10:44:09Z"},
            {"eventAction": "expiration", "eventDate": "2030-03-26T10:44:09Z"},
        ],
        "status": ["client transfer prohibited"],
        "entities": [
            {"roles": ["registrar"], "vcardArray": ["vcard", [["version", {}, "text", "4.0"], ["fn", {}, "text", "Example Registrar"]]]},
        ],
    }

    def test_rdap(self):
        session = FakeSession(FakeResponse(200, self.RDAP))
        record = RdapWhoisSource(session=session).lookup("rdap-ok.example")

        assert record.creation_date == datetime.datetime(2015, 3, 26, 10, 44, 9, tzinfo=datetime.timezone.utc)
        assert record.registrar == "Example Registrar"
        assert record.statuses == ("client transfer prohibited",)
        assert record.source == "rdap"
        assert record.age_days() > 3000

    def test_not_registered(self):
        with pytest.raises(SourceError):
            RdapWhoisSource(session=FakeSession(FakeResponse(404))).lookup("rdap-404.example")

    def test_whois_fallback(self, monkeypatch):
        monkeypatch.setattr(
            whois_module.whois,
            "whois",
            lambda domain: {
                "creation_date": [datetime.datetime(2010, 1, 1), datetime.datetime(2010, 1, 2)],
                "status": "ok",
                "registrar": "Fallback Registrar",
            },
        )
        record = RdapWhoisSource(session=FakeSession(FakeResponse(503))).lookup("rdap-fallback.example")
        assert record.source == "whois"
        assert record.creation_date.year == 2010
        assert record.statuses == ("ok",)

    def test_both_fail(self, monkeypatch):
        def broken(domain):
            raise ConnectionResetError("port 43 closed")

        monkeypatch.setattr(whois_module.whois, "whois", broken)
        source = RdapWhoisSource(session=FakeSession(error=requests.Timeout("slow")))
        with pytest.raises(SourceError):
            source.lookup("rdap-broken.example")


class TestSafeBrowsingClient:

    def test_threat_match(self):
        session = FakeSession(FakeResponse(200, {"matches": [{"threatType": "SOCIAL_ENGINEERING"}]}))
        verdict = GoogleSafeBrowsingClient(api_key="k", session=session).lookup("gsb-bad.example")

        assert verdict.safe is False
        assert verdict.threats == ["SOCIAL_ENGINEERING"]
        method, _, kwargs = session.calls[0]
        assert method == "POST"
        assert kwargs["params"] == {"key": "k"}

    def test_clean(self):
        session = FakeSession(FakeResponse(200, {}))
        assert GoogleSafeBrowsingClient(api_key="k", session=session).lookup("gsb-ok.example").safe is True

    def test_http_error(self):
        client = GoogleSafeBrowsingClient(api_key="k", session=FakeSession(FakeResponse(403)))
        with pytest.raises(SourceError):
            client.lookup("gsb-403.example")


class TestSocketTLSProbe:

    def test_connection_refused_means_no_ssl(self, monkeypatch):
        def refuse(address, timeout=None):
            raise ConnectionRefusedError("refused")

        monkeypatch.setattr(tls_module.socket, "create_connection", refuse)
        report = SocketTLSProbe().probe("tls-refused.example")
        assert report.has_ssl is False

    def test_timeout(self, monkeypatch):
        def hang(address, timeout=None):
            raise socket.timeout("timed out")

        monkeypatch.setattr(tls_module.socket, "create_connection", hang)
        with pytest.raises(SourceError):
            SocketTLSProbe().probe("tls-timeout.example")

    def test_bad_certificate(self, monkeypatch):
        class DummySocket:
            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        class RejectingContext:
            def wrap_socket(self, sock, server_hostname=None):
                raise ssl.SSLCertVerificationError("certificate verify failed")

        monkeypatch.setattr(tls_module.socket, "create_connection", lambda address, timeout=None: DummySocket())
        monkeypatch.setattr(tls_module.ssl, "create_default_context", lambda: RejectingContext())

        report = SocketTLSProbe().probe("tls-badcert.example")
        assert report.has_ssl is True
        assert report.valid is False
