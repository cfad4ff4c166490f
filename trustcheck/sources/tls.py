import datetime
import logging
import socket
import ssl
import time
from dataclasses import dataclass
from typing import Optional

from trustcheck.cache import get_cache, set_cache
from trustcheck.config import REQUEST_TIMEOUT
from trustcheck.errors import SourceError

logger = logging.getLogger(__name__)

CERT_DATE_FORMAT = "%b %d %H:%M:%S %Y %Z"


@dataclass(frozen=True)
class TLSReport:
    domain: str
    has_ssl: bool
    valid: bool = False
    issuer: Optional[str] = None
    days_old: Optional[int] = None
    days_remaining: Optional[int] = None
    handshake_seconds: Optional[float] = None
    error: Optional[str] = None


def _cert_date(value: str) -> datetime.datetime:
    parsed = datetime.datetime.strptime(value, CERT_DATE_FORMAT)
    return parsed.replace(tzinfo=datetime.timezone.utc)


def _issuer_name(cert: dict) -> Optional[str]:
    for rdn in cert.get("issuer", ()):
        for key, value in rdn:
            if key == "organizationName":
                return value
    return None


class TLSProbe:

    def probe(self, domain: str) -> TLSReport:
        raise NotImplementedError()


class SocketTLSProbe(TLSProbe):
    """Verifying TLS handshake on port 443."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, port: int = 443, cache_ttl: int = 3600):
        self.timeout = timeout
        self.port = port
        self.cache_ttl = cache_ttl

    def probe(self, domain: str) -> TLSReport:
        cache_key = f"tls:{domain}"
        if cached := get_cache(cache_key):
            return cached

        report = self._handshake(domain)
        set_cache(cache_key, report, expire=self.cache_ttl)
        return report

    def _handshake(self, domain: str) -> TLSReport:
        ctx = ssl.create_default_context()
        started = time.monotonic()

        try:
            with socket.create_connection((domain, self.port), timeout=self.timeout) as sock:
                with ctx.wrap_socket(sock, server_hostname=domain) as ssock:
                    cert = ssock.getpeercert()
        except ssl.SSLCertVerificationError as e:
            reason = getattr(e, "verify_message", None) or str(e)
            return TLSReport(domain=domain, has_ssl=True, valid=False, error=reason)
        except socket.timeout as e:
            raise SourceError(f"TLS handshake with {domain} timed out") from e
        except (ssl.SSLError, ConnectionError, socket.gaierror) as e:
            logger.debug("No TLS on %s: %s", domain, e)
            return TLSReport(domain=domain, has_ssl=False, error=str(e))
        except OSError as e:
            raise SourceError(f"TLS probe of {domain} failed: {e}") from e

        elapsed = time.monotonic() - started
        now = datetime.datetime.now(datetime.timezone.utc)

        days_old = days_remaining = None
        if cert.get("notBefore"):
            days_old = (now - _cert_date(cert["notBefore"])).days
        if cert.get("notAfter"):
            days_remaining = (_cert_date(cert["notAfter"]) - now).days

        return TLSReport(
            domain=domain,
            has_ssl=True,
            valid=True,
            issuer=_issuer_name(cert),
            days_old=days_old,
            days_remaining=days_remaining,
            handshake_seconds=round(elapsed, 3),
        )
