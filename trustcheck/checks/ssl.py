from dataclasses import asdict
from typing import Optional

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.signals import ssl_grade, ssl_score
from trustcheck.errors import SourceError
from trustcheck.models import CheckResult, RiskLevel
from trustcheck.sources.tls import TLSProbe


class SSLCheck(Check):
    name = "ssl"
    label = "SSL Certificate"
    category = Category.TLS

    def __init__(self, probe: Optional[TLSProbe], weight: float = 0.15):
        super().__init__(weight)
        self.probe = probe

    def run(self, ctx: CheckContext) -> CheckResult:
        if self.probe is None:
            return self.unavailable("TLS probe disabled", transient=False)

        try:
            report = self.probe.probe(ctx.domain)
        except SourceError as e:
            return self.unavailable(f"SSL verification failed: {e}")

        details = asdict(report)

        if not report.has_ssl:
            return self.result(
                0, passed=False,
                message="No SSL certificate found - Site is not secure",
                risk_level=RiskLevel.HIGH,
                details={**details, "grade": "F"},
            )

        score = ssl_score(report.has_ssl, report.valid, report.handshake_seconds)
        details["grade"] = ssl_grade(score)

        if not report.valid:
            return self.result(
                score, passed=False,
                message="Invalid SSL certificate",
                risk_level=RiskLevel.HIGH,
                details=details,
            )

        message = "Valid SSL certificate"
        if report.issuer:
            message += f" ({report.issuer})"
        if report.days_old is not None and report.days_old < 30:
            message += f" - Recently issued ({report.days_old} days ago)"
        if report.days_remaining is not None and report.days_remaining < 30:
            if report.days_remaining < 0:
                message += " - EXPIRED"
            else:
                message += f" - Expires in {report.days_remaining} days"

        return self.result(score, passed=True, message=message, details=details)
