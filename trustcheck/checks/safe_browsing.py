from typing import Optional

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.signals import safe_browsing_score
from trustcheck.errors import SourceError
from trustcheck.models import CheckResult, RiskLevel
from trustcheck.sources.safe_browsing import SafeBrowsingClient


class SafeBrowsingCheck(Check):
    name = "safe_browsing"
    label = "Safe Browsing"
    category = Category.REPUTATION

    def __init__(self, client: Optional[SafeBrowsingClient], weight: float = 0.10):
        super().__init__(weight)
        self.client = client

    def run(self, ctx: CheckContext) -> CheckResult:
        if self.client is None or not self.client.configured:
            return self.unavailable("Safe Browsing - No API key provided", transient=False)

        try:
            verdict = self.client.lookup(ctx.domain)
        except SourceError as e:
            return self.unavailable(f"Unable to verify with Google Safe Browsing: {e}")

        if verdict.safe:
            return self.result(
                safe_browsing_score(True), passed=True,
                message="No threats found by Google Safe Browsing",
                details={"threats": []},
            )

        return self.result(
            safe_browsing_score(False), passed=False,
            message=f"Threats detected: {', '.join(verdict.threats)}",
            risk_level=RiskLevel.HIGH,
            details={"threats": list(verdict.threats)},
        )
