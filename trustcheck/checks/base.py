from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from trustcheck.checks.types import Category, RequestType, Stage
from trustcheck.models import CheckResult, RiskLevel


@dataclass(frozen=True)
class CheckContext:
    """
    What a check gets to look at for one request.

    domain:       normalized (lower-case) domain
    cleaned:      same domain with its original case kept
    request_type: "general" or "crypto"
    """

    domain: str
    cleaned: str
    request_type: RequestType = RequestType.GENERAL


class Check:
    """
    Base class for scoring checks.

    Attributes:
        name:          key in ValidationResult.checks and in config.yaml weights
        label:         human readable name
        stage:         gate (may short-circuit) or detector (scored)
        category:      grouping used by the CLI explain view
        request_types: request types the check runs for
    """

    name = "base"
    label = "Base"
    stage: Stage = Stage.DETECTOR
    category: Category = Category.OTHER
    request_types: Tuple[RequestType, ...] = (RequestType.GENERAL, RequestType.CRYPTO)

    def __init__(self, weight: float = 0.0):
        self.weight = weight

    def applies_to(self, request_type: RequestType) -> bool:
        return request_type in self.request_types

    # -------------------------------------------------------
    # Output helpers
    # -------------------------------------------------------

    def result(
        self,
        score: float,
        passed: bool,
        message: str,
        risk_level: RiskLevel = RiskLevel.LOW,
        details: Optional[Dict[str, Any]] = None,
        weight: Optional[float] = None,
    ) -> CheckResult:
        """Normal check output, score clamped to 0..100."""
        return CheckResult(
            name=self.name,
            label=self.label,
            score=int(round(min(max(score, 0), 100))),
            weight=self.weight if weight is None else weight,
            passed=passed,
            message=message,
            risk_level=risk_level,
            details=details or {},
            category=self.category.value,
        )

    def unavailable(
        self,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
        transient: bool = True,
    ) -> CheckResult:
        """
        The check could not run (source down, no API key, timeout...).

        score = None, so the engine leaves it out of the combined score.
        transient=False marks a source that is disabled or not configured;
        results with transient gaps are not cached.
        """
        return CheckResult(
            name=self.name,
            label=self.label,
            score=None,
            weight=self.weight,
            passed=True,
            message=f"[UNAVAILABLE] {reason}",
            risk_level=RiskLevel.LOW,
            details=details or {},
            category=self.category.value,
            transient=transient,
        )

    # -------------------------------------------------------

    def run(self, ctx: CheckContext) -> CheckResult:
        """MUST be overridden by each detector."""
        raise NotImplementedError()
