import logging
from typing import Optional

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.typosquat import TyposquattingDetector
from trustcheck.models import CheckResult
from trustcheck.rules import TyposquatRules
from trustcheck.sources.stores import ExchangeRegistry

logger = logging.getLogger(__name__)


class TyposquattingCheck(Check):
    name = "typosquatting"
    label = "Phishing Pattern Analysis"
    category = Category.HEURISTICS

    def __init__(self, rules: TyposquatRules, registry: Optional[ExchangeRegistry] = None, weight: float = 0.15):
        super().__init__(weight)
        self.rules = rules
        self.registry = registry

    def _detector(self) -> TyposquattingDetector:
        if self.registry is None:
            return TyposquattingDetector(self.rules)
        try:
            extra = self.registry.domains()
        except Exception as e:  # noqa: BLE001
            logger.warning("Exchange registry unavailable, using static site list: %s", e)
            extra = []
        return TyposquattingDetector(self.rules.with_extra_sites(extra))

    def run(self, ctx: CheckContext) -> CheckResult:
        analysis = self._detector().analyze(ctx.cleaned)

        if analysis.is_phishing:
            message = analysis.reason
            if analysis.official_url:
                message += f" - Official: {analysis.official_url}"
        else:
            message = "No phishing patterns detected"

        return self.result(
            analysis.confidence,
            passed=not analysis.is_phishing,
            message=message,
            risk_level=analysis.risk_level,
            details=analysis.to_details(),
        )
