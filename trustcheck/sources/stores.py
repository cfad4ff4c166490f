"""
Record stores consulted by the engine.

The engine only needs a narrow interface from each store; the in-memory
versions back the tests and the --offline CLI mode, the disk versions use
diskcache so records survive restarts.
"""

import logging
import re
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

import diskcache
import yaml

from trustcheck.domain import domain_label
from trustcheck.errors import StoreError
from trustcheck.models import BlacklistRecord, ExchangeRecord, UserReport

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Blacklist
# ------------------------------------------------------------------

class BlacklistStore:

    def lookup(self, domain: str) -> Optional[BlacklistRecord]:
        raise NotImplementedError()

    def insert(self, record: BlacklistRecord) -> bool:
        """Store record unless the domain is already listed. Returns True if written."""
        raise NotImplementedError()


class InMemoryBlacklistStore(BlacklistStore):

    def __init__(self, records: Iterable[BlacklistRecord] = ()):
        self._records: Dict[str, BlacklistRecord] = {}
        self._lock = threading.Lock()
        for record in records:
            self.insert(record)

    def lookup(self, domain: str) -> Optional[BlacklistRecord]:
        return self._records.get(domain.lower())

    def insert(self, record: BlacklistRecord) -> bool:
        key = record.domain.lower()
        with self._lock:
            if key in self._records:
                return False
            self._records[key] = record
            return True

    def __len__(self):
        return len(self._records)


class DiskBlacklistStore(BlacklistStore):

    def __init__(self, directory: str):
        self.directory = directory
        self._index = diskcache.Index(directory)

    def lookup(self, domain: str) -> Optional[BlacklistRecord]:
        try:
            data = self._index.get(domain.lower())
        except Exception as e:  # noqa: BLE001
            raise StoreError(f"Blacklist read failed: {e}") from e
        return BlacklistRecord.from_dict(data) if data else None

    def insert(self, record: BlacklistRecord) -> bool:
        key = record.domain.lower()
        try:
            with self._index.transact():
                if key in self._index:
                    return False
                self._index[key] = record.to_dict()
                return True
        except Exception as e:  # noqa: BLE001
            raise StoreError(f"Blacklist write failed: {e}") from e

    def __len__(self):
        return len(self._index)


# ------------------------------------------------------------------
# Whitelist
# ------------------------------------------------------------------

class WhitelistStore:
    """Trusted domains; a listed domain gets a score bonus, never a free pass."""

    def contains(self, domain: str) -> bool:
        raise NotImplementedError()

    def add(self, domain: str, reason: str = "") -> bool:
        raise NotImplementedError()


class InMemoryWhitelistStore(WhitelistStore):

    def __init__(self, domains: Iterable[str] = ()):
        self._domains: Dict[str, str] = {}
        self._lock = threading.Lock()
        for domain in domains:
            self.add(domain)

    def contains(self, domain: str) -> bool:
        return domain.lower() in self._domains

    def add(self, domain: str, reason: str = "") -> bool:
        key = domain.lower()
        with self._lock:
            if key in self._domains:
                return False
            self._domains[key] = reason
            return True


class DiskWhitelistStore(WhitelistStore):

    def __init__(self, directory: str):
        self.directory = directory
        self._index = diskcache.Index(directory)

    def contains(self, domain: str) -> bool:
        try:
            return domain.lower() in self._index
        except Exception as e:  # noqa: BLE001
            raise StoreError(f"Whitelist read failed: {e}") from e

    def add(self, domain: str, reason: str = "") -> bool:
        key = domain.lower()
        try:
            with self._index.transact():
                if key in self._index:
                    return False
                self._index[key] = {"reason": reason}
                return True
        except Exception as e:  # noqa: BLE001
            raise StoreError(f"Whitelist write failed: {e}") from e


# ------------------------------------------------------------------
# Exchange registry
# ------------------------------------------------------------------

def url_host(url: str) -> str:
    if "://" not in url:
        url = f"https://{url}"
    host = (urlparse(url).hostname or "").lower()
    return re.sub(r"^www\.", "", host)


class ExchangeRegistry:

    def __init__(self, exchanges: Iterable[ExchangeRecord] = ()):
        self._exchanges: List[ExchangeRecord] = list(exchanges)

    @classmethod
    def from_yaml(cls, path) -> "ExchangeRegistry":
        path = Path(path)
        if not path.exists():
            logger.warning("Exchange registry file %s not found, registry is empty", path)
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                rows = (yaml.safe_load(f) or {}).get("exchanges", [])
        except (OSError, yaml.YAMLError) as e:
            raise StoreError(f"Cannot load exchange registry {path}: {e}") from e

        return cls(ExchangeRecord(**row) for row in rows)

    def active(self) -> List[ExchangeRecord]:
        return [e for e in self._exchanges if e.is_active]

    def lookup(self, domain: str) -> Optional[ExchangeRecord]:
        """
        Match on URL host (same host or a sub-host of it).

        Only exchanges without a URL fall back to the name, compared with the
        registrable label ("Gate IO" -> "gateio" matches gateio.<any suffix>).
        """
        domain = domain.lower()
        label = domain_label(domain)

        for exchange in self.active():
            if exchange.url:
                host = url_host(exchange.url)
                if host and (host == domain or domain.endswith("." + host)):
                    return exchange
            elif label and re.sub(r"[^a-z0-9]", "", exchange.name.lower()) == label:
                return exchange
        return None

    def domains(self) -> List[str]:
        hosts = []
        for exchange in self.active():
            if exchange.url:
                host = url_host(exchange.url)
                if host and host not in hosts:
                    hosts.append(host)
        return hosts


# ------------------------------------------------------------------
# User reports
# ------------------------------------------------------------------

class UserReportStore:

    def recent(self, domain: str, limit: int = 10) -> List[UserReport]:
        raise NotImplementedError()

    def add(self, report: UserReport) -> None:
        raise NotImplementedError()

    def count(self, domain: str) -> int:
        return len(self.recent(domain))


class InMemoryUserReportStore(UserReportStore):

    def __init__(self, reports: Iterable[UserReport] = ()):
        self._reports: List[UserReport] = list(reports)

    def recent(self, domain: str, limit: int = 10) -> List[UserReport]:
        domain = domain.lower()
        matches = [r for r in self._reports if r.domain.lower() == domain]
        matches.sort(key=lambda r: r.created_at or "", reverse=True)
        return matches[:limit]

    def add(self, report: UserReport) -> None:
        self._reports.append(report)


class DiskUserReportStore(UserReportStore):

    def __init__(self, directory: str):
        self.directory = directory
        self._index = diskcache.Index(directory)

    def recent(self, domain: str, limit: int = 10) -> List[UserReport]:
        try:
            rows = self._index.get(domain.lower(), [])
        except Exception as e:  # noqa: BLE001
            raise StoreError(f"Report read failed: {e}") from e
        reports = [UserReport(**row) for row in rows]
        reports.sort(key=lambda r: r.created_at or "", reverse=True)
        return reports[:limit]

    def add(self, report: UserReport) -> None:
        key = report.domain.lower()
        with self._index.transact():
            rows = self._index.get(key, [])
            rows.append(asdict(report))
            self._index[key] = rows
