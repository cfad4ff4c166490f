from dataclasses import asdict

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Category
from trustcheck.detectors.signals import user_report_score
from trustcheck.errors import StoreError
from trustcheck.models import CheckResult, RiskLevel
from trustcheck.sources.stores import UserReportStore


class UserReportsCheck(Check):
    name = "user_reports"
    label = "User Reports Check"
    category = Category.COMMUNITY

    def __init__(self, store: UserReportStore, weight: float = 0.15):
        super().__init__(weight)
        self.store = store

    def run(self, ctx: CheckContext) -> CheckResult:
        try:
            reports = self.store.recent(ctx.domain)
        except StoreError as e:
            return self.unavailable(f"User reports unavailable: {e}")

        count = len(reports)
        if count == 0:
            return self.result(100, passed=True, message="No user reports", details={"report_count": 0})

        return self.result(
            user_report_score(count),
            passed=False,
            message=f"{count} user report(s) found",
            risk_level=RiskLevel.HIGH if count >= 5 else RiskLevel.MEDIUM,
            details={"report_count": count, "recent_reports": [asdict(r) for r in reports]},
        )
