from typing import Mapping

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.patterns import SuspiciousPatternDetector
from trustcheck.models import CheckResult
from trustcheck.rules import PatternRuleset


class SuspiciousDomainCheck(Check):
    """Lexical risk factors, with the ruleset picked by request type."""

    name = "suspicious_domain"
    label = "Suspicious Domain Detection"
    category = Category.HEURISTICS

    def __init__(self, rulesets: Mapping[str, PatternRuleset], weight: float = 0.10):
        super().__init__(weight)
        self.detectors = {key: SuspiciousPatternDetector(rs) for key, rs in rulesets.items()}

    def run(self, ctx: CheckContext) -> CheckResult:
        detector = self.detectors.get(ctx.request_type.value) or self.detectors["general"]
        analysis = detector.analyze(ctx.domain)

        if analysis.is_suspicious:
            message = f"Suspicious domain patterns detected: {', '.join(analysis.reasons)}"
        else:
            message = "No suspicious patterns detected"

        return self.result(
            analysis.score,
            passed=not analysis.is_suspicious,
            message=message,
            risk_level=analysis.risk_level,
            details=analysis.to_details(),
        )
