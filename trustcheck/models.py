"""Records and results shared by detectors, checks and the scoring engine."""

import datetime
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Status(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class Reputation(str, Enum):
    CLEAN = "clean"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    weight: int
    detected: bool = False


@dataclass(frozen=True)
class BlacklistRecord:
    domain: str
    reason: str
    severity: str = "high"
    risk_level: str = "high"
    category: str = "malicious"
    evidence: Tuple[str, ...] = ()
    reported_by: str = "Security Database"
    verification_status: str = "confirmed"
    report_date: Optional[str] = None
    target_brand: Optional[str] = None
    data_source: str = "internal"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["evidence"] = list(self.evidence)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlacklistRecord":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        known["evidence"] = tuple(known.get("evidence") or ())
        return cls(**known)


@dataclass(frozen=True)
class ExchangeRecord:
    id: str
    name: str
    trust_score: float = 0.0
    trust_score_rank: int = 999
    url: Optional[str] = None
    is_active: bool = True
    country: Optional[str] = None
    year_established: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UserReport:
    domain: str
    report_type: str
    description: str = ""
    created_at: Optional[str] = None
    status: str = "pending"


@dataclass(frozen=True)
class CheckResult:
    """
    Output of one check.

    score is None when the check could not run; such results are kept for
    display but excluded from the combined score.
    """

    name: str
    label: str
    score: Optional[int]
    weight: float
    passed: bool
    message: str
    risk_level: RiskLevel = RiskLevel.LOW
    details: Dict[str, Any] = field(default_factory=dict)
    category: str = "other"
    # unavailable because a source failed or timed out, not because it is disabled
    transient: bool = False

    @property
    def available(self) -> bool:
        return self.score is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.label,
            "passed": self.passed,
            "score": self.score,
            "weight": self.weight,
            "risk_level": self.risk_level.value,
            "message": self.message,
            "details": self.details,
            "category": self.category,
        }


@dataclass(frozen=True)
class ValidationResult:
    domain: str
    original_input: str
    final_score: int
    status: Status
    checks: Dict[str, CheckResult]
    summary: str
    recommendations: List[str]
    timestamp: str = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc).isoformat()
    )
    cached: bool = False
    whitelisted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "original_input": self.original_input,
            "final_score": self.final_score,
            "status": self.status.value,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
            "summary": self.summary,
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp,
            "cached": self.cached,
            "whitelisted": self.whitelisted,
        }
