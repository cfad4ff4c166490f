from typing import Optional

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.signals import whois_score
from trustcheck.domain import registered_domain
from trustcheck.errors import SourceError
from trustcheck.models import CheckResult, RiskLevel
from trustcheck.sources.whois import RegistrationSource


class WhoisCheck(Check):
    name = "whois"
    label = "Domain Registration"
    category = Category.WHOIS

    def __init__(self, source: Optional[RegistrationSource], weight: float = 0.10):
        super().__init__(weight)
        self.source = source

    def run(self, ctx: CheckContext) -> CheckResult:
        if self.source is None:
            return self.unavailable("Registration lookup disabled", transient=False)

        root = registered_domain(ctx.domain)
        try:
            record = self.source.lookup(root)
        except SourceError as e:
            return self.unavailable(f"Unable to verify domain registration: {e}")

        age_days = record.age_days()
        scored = whois_score(age_days, record.statuses)
        score = scored["score"]

        if score < 30:
            risk = RiskLevel.HIGH
        elif score < 60:
            risk = RiskLevel.MEDIUM
        else:
            risk = RiskLevel.LOW

        return self.result(
            score,
            passed=score >= 60,
            message=scored["message"],
            risk_level=risk,
            details={
                "domain": root,
                "creation_date": record.creation_date.isoformat() if record.creation_date else None,
                "expiration_date": record.expiration_date.isoformat() if record.expiration_date else None,
                "registrar": record.registrar,
                "status": list(record.statuses),
                "domain_age_days": age_days,
                "source": record.source,
                "scoring": {
                    "age_score": scored["age_score"],
                    "status_score": scored["status_score"],
                    "age_weight": 0.3,
                    "status_weight": 0.7,
                },
            },
        )
