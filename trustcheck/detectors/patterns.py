"""
Lexical risk analysis of a domain name.

A single detector driven by a PatternRuleset: each ruleset decides which
risk factors are active, which keyword list is used and how many keyword
hits are needed. Factor weights are summed into a total risk; the trust
score is 100 minus that total.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from trustcheck.domain import split_domain
from trustcheck.models import RiskFactor, RiskLevel
from trustcheck.rules import PatternRuleset

HIGH_RISK = 50
MEDIUM_RISK = 25

FACTOR_LABELS = {
    "numbers": "Excessive numbers",
    "hyphens": "Multiple hyphens",
    "length": "Very long domain",
    "keywords": "Suspicious keywords",
    "random": "Random characters",
    "tld": "Suspicious TLD",
    "phishing_patterns": "Phishing patterns",
    "repeated": "Repeated characters",
}

PHISHING_PATTERNS = (
    re.compile(r"\d{4,}"),                          # 4+ consecutive digits
    re.compile(r"[a-z]{2,}-[a-z]{2,}-[a-z]{2,}"),   # three hyphenated words
    re.compile(r"[0-9]+[a-z]+[0-9]+"),              # digits around letters
    re.compile(r"^[a-z]{1,2}[0-9]+[a-z]"),          # short prefix + digits + letters
)

VOWELS = re.compile(r"[aeiou]")
CONSONANTS = re.compile(r"[bcdfghjklmnpqrstvwxyz]")
NATURAL_FLOW = re.compile(
    r"[aeiou][bcdfghjklmnpqrstvwxyz][aeiou]|[bcdfghjklmnpqrstvwxyz][aeiou][bcdfghjklmnpqrstvwxyz]"
)
REPEATED = re.compile(r"(.)\1{2,}")


def risk_level_for(total_risk: int) -> RiskLevel:
    if total_risk >= HIGH_RISK:
        return RiskLevel.HIGH
    if total_risk >= MEDIUM_RISK:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def is_random_looking(name: str) -> bool:
    vowels = len(VOWELS.findall(name))
    consonants = len(CONSONANTS.findall(name))

    if vowels == 0:
        return True
    if consonants / vowels > 4:
        return True
    return not NATURAL_FLOW.search(name) and len(name) > 6


@dataclass(frozen=True)
class PatternResult:
    ruleset: str
    score: int
    total_risk: int
    risk_level: RiskLevel
    reasons: List[str] = field(default_factory=list)
    suspicious_patterns: List[str] = field(default_factory=list)
    risk_factors: Tuple[RiskFactor, ...] = ()

    @property
    def is_suspicious(self) -> bool:
        return self.total_risk >= MEDIUM_RISK

    def to_details(self) -> Dict[str, Any]:
        return {
            "ruleset": self.ruleset,
            "is_suspicious": self.is_suspicious,
            "trust_score": self.score,
            "total_risk": self.total_risk,
            "risk_level": self.risk_level.value,
            "reasons": list(self.reasons),
            "suspicious_patterns": list(self.suspicious_patterns),
            "risk_factors": [
                {"factor": f.factor, "weight": f.weight, "detected": f.detected}
                for f in self.risk_factors
            ],
        }


class SuspiciousPatternDetector:

    def __init__(self, ruleset: PatternRuleset):
        unknown = [f for f in ruleset.factors if f not in FACTOR_LABELS]
        if unknown:
            raise ValueError(f"Unknown risk factors in ruleset {ruleset.name!r}: {unknown}")
        self.ruleset = ruleset

    # Each probe returns a description when the factor fires, else None.

    def _numbers(self, domain, name, tld):
        if not name:
            return None
        ratio = sum(ch.isdigit() for ch in name) / len(name)
        if ratio > 0.3:
            return f"High number ratio: {round(ratio * 100)}%"
        return None

    def _hyphens(self, domain, name, tld):
        count = name.count("-")
        if count >= 3:
            return f"Multiple hyphens: {count}"
        return None

    def _length(self, domain, name, tld):
        if len(name) > 20:
            return f"Very long domain: {len(name)} characters"
        return None

    def _keywords(self, domain, name, tld):
        found = [kw for kw in self.ruleset.keywords if kw in domain]
        if len(found) >= self.ruleset.keyword_threshold:
            return f"Suspicious keywords: {', '.join(found)}"
        return None

    def _random(self, domain, name, tld):
        if is_random_looking(name):
            return "Random-looking domain pattern"
        return None

    def _tld(self, domain, name, tld):
        if tld in self.ruleset.suspicious_tlds:
            return f"Suspicious TLD: .{tld}"
        return None

    def _phishing_patterns(self, domain, name, tld):
        matched = [p for p in PHISHING_PATTERNS if p.search(domain)]
        if matched:
            return f"Phishing patterns detected: {len(matched)}"
        return None

    def _repeated(self, domain, name, tld):
        if REPEATED.search(name):
            return "Repeated characters detected"
        return None

    def analyze(self, domain: str) -> PatternResult:
        domain = domain.lower()
        name, tld = split_domain(domain)

        factors = []
        reasons = []
        patterns = []
        total_risk = 0

        for key in self.ruleset.factors:
            weight = int(self.ruleset.factor_weights.get(key, 0))
            label = FACTOR_LABELS.get(key, key)
            finding = getattr(self, f"_{key}")(domain, name, tld)

            factors.append(RiskFactor(label, weight, finding is not None))
            if finding is not None:
                total_risk += weight
                patterns.append(finding)
                reasons.append(label)

        return PatternResult(
            ruleset=self.ruleset.name,
            score=max(0, 100 - total_risk),
            total_risk=total_risk,
            risk_level=risk_level_for(total_risk),
            reasons=reasons,
            suspicious_patterns=patterns,
            risk_factors=tuple(factors),
        )
