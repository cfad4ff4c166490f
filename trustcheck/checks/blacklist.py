import datetime
import logging
from typing import Optional

from trustcheck.checks.base import CheckContext
from trustcheck.checks.gate import Gate, GateOutcome
from trustcheck.checks.types import Category
from trustcheck.detectors.signals import classify_reputation
from trustcheck.errors import SourceError, StoreError
from trustcheck.models import BlacklistRecord, CheckResult, Reputation, RiskLevel
from trustcheck.rules import ReputationRules
from trustcheck.sources.stores import BlacklistStore
from trustcheck.sources.virustotal import VT_GUI_URL, ReputationFeed, ReputationStats

logger = logging.getLogger(__name__)


def feed_record(domain: str, stats: ReputationStats, level: Reputation) -> BlacklistRecord:
    """Pending blacklist entry for a domain flagged by the reputation feed."""
    flagged = stats.malicious if level == Reputation.MALICIOUS else stats.malicious + stats.suspicious
    severity = "high" if level == Reputation.MALICIOUS else "medium"
    return BlacklistRecord(
        domain=domain,
        reason=f"VirusTotal detection: {flagged}/{stats.total} security vendors flagged as {level.value}",
        severity=severity,
        risk_level=severity,
        category=level.value,
        evidence=(VT_GUI_URL.format(domain=domain),),
        reported_by="VirusTotal",
        verification_status="pending",
        report_date=datetime.date.today().isoformat(),
        data_source="virustotal",
    )


class BlacklistCheck(Gate):
    name = "malicious_site"
    label = "Malicious Site Check"
    category = Category.REPUTATION

    def __init__(
        self,
        store: BlacklistStore,
        feed: Optional[ReputationFeed] = None,
        rules: ReputationRules = ReputationRules(),
        weight: float = 0.25,
    ):
        super().__init__(weight)
        self.store = store
        self.feed = feed
        self.rules = rules

    def _local(self, domain: str) -> Optional[BlacklistRecord]:
        try:
            return self.store.lookup(domain)
        except StoreError as e:
            logger.warning("Blacklist store unavailable for %s: %s", domain, e)
            return None

    def blocked(self, record: BlacklistRecord) -> CheckResult:
        return self.result(
            0,
            passed=False,
            message=f"Blacklisted: {record.reported_by}",
            risk_level=RiskLevel.HIGH,
            details={"is_blacklisted": True, **record.to_dict()},
        )

    def evaluate(self, ctx: CheckContext) -> GateOutcome:
        record = self._local(ctx.domain)
        if record:
            return GateOutcome(self.blocked(record), terminal=True, record=record)

        if self.feed is None or not self.feed.configured:
            return GateOutcome(self.result(
                100, passed=True,
                message="No malicious patterns detected in database",
                details={"is_blacklisted": False},
            ))

        try:
            stats = self.feed.query(ctx.domain)
        except SourceError as e:
            logger.warning("Reputation feed failed for %s: %s", ctx.domain, e)
            return GateOutcome(self.result(
                100, passed=True,
                message="Unable to verify reputation, no local blacklist entry",
                details={"is_blacklisted": False, "error": str(e)},
            ))

        if stats is None:
            return GateOutcome(self.result(
                100, passed=True,
                message="No malicious patterns detected in database",
                details={"is_blacklisted": False, "reputation": "unknown"},
            ))

        level = classify_reputation(stats.malicious, stats.suspicious, self.rules)
        if level != Reputation.CLEAN:
            record = feed_record(ctx.domain, stats, level)
            return GateOutcome(self.blocked(record), terminal=True, record=record, persist=True)

        return GateOutcome(self.result(
            100, passed=True,
            message="No malicious patterns detected in database",
            details={
                "is_blacklisted": False,
                "reputation": level.value,
                "vendors": {"malicious": stats.malicious, "suspicious": stats.suspicious, "total": stats.total},
            },
        ))
