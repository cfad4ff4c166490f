"""Scoring of the peripheral signals: registration data, TLS, reports, feeds."""

from typing import Iterable, List, Optional, Tuple

from trustcheck.models import Reputation
from trustcheck.rules import ReputationRules

CRITICAL_STATUSES = {
    "clienthold": "Domain on hold (suspended)",
    "serverhold": "Domain on hold (suspended)",
    "redemptionperiod": "In redemption period (expired)",
    "pendingrestore": "Pending restore",
    "pendingdelete": "Pending deletion",
}

GOOD_STATUSES = {"ok", "active", "clienttransferprohibited", "servertransferprohibited"}

AGE_WEIGHT = 0.3
STATUS_WEIGHT = 0.7

GRADES = (
    (95, "A+"), (90, "A"), (85, "A-"), (80, "B+"), (75, "B"), (70, "B-"),
    (65, "C+"), (60, "C"), (55, "C-"), (50, "D"),
)


# ------------------------------------------------------------------
# WHOIS
# ------------------------------------------------------------------

def whois_age_score(age_days: int) -> Tuple[int, str]:
    if age_days > 730:
        return 100, f"Established domain ({age_days // 365} years old)"
    if age_days > 365:
        return 85, f"Domain registered {age_days // 365} year ago"
    if age_days > 180:
        return 70, f"Domain registered {age_days} days ago"
    if age_days > 90:
        return 50, f"Relatively new domain ({age_days} days old)"
    if age_days > 30:
        return 30, f"New domain ({age_days} days old)"
    return 10, f"Very new domain ({age_days} days old)"


def _normalize_status(status: str) -> str:
    # "clientTransferProhibited https://icann.org/epp#..." -> "clienttransferprohibited"
    return status.strip().split(" ")[0].lower()


def domain_status_score(statuses: Iterable[str]) -> Tuple[int, List[str]]:
    normalized = [_normalize_status(s) for s in statuses if s]

    for status, message in CRITICAL_STATUSES.items():
        if status in normalized:
            return 0, [message]

    if any(s in GOOD_STATUSES for s in normalized):
        messages = []
        if "clienttransferprohibited" in normalized or "servertransferprohibited" in normalized:
            messages.append("Transfer protection enabled")
        if "ok" in normalized or "active" in normalized:
            messages.append("Normal status")
        return 100, messages

    return 50, ["Standard registration status"]


def whois_score(age_days: Optional[int], statuses: Iterable[str]) -> dict:
    """Combine age (30%) and status (70%). Unknown age -> status only."""
    status_score, status_messages = domain_status_score(statuses)

    if age_days is None:
        score = status_score
        age_score = None
        message = "Registration date unknown"
    else:
        age_score, message = whois_age_score(age_days)
        score = round(age_score * AGE_WEIGHT + status_score * STATUS_WEIGHT)

    if status_messages:
        message += f"\nStatus: {', '.join(status_messages)}"

    return {
        "score": score,
        "message": message,
        "age_score": age_score,
        "status_score": status_score,
        "status_messages": status_messages,
    }


# ------------------------------------------------------------------
# TLS
# ------------------------------------------------------------------

def handshake_bonus(seconds: Optional[float]) -> int:
    if seconds is None:
        return 0
    if seconds < 1:
        return 10
    if seconds < 2:
        return 7
    if seconds < 3:
        return 5
    if seconds < 5:
        return 3
    return 0


def ssl_grade(score: int) -> str:
    for floor, grade in GRADES:
        if score >= floor:
            return grade
    return "F"


def ssl_score(has_ssl: bool, valid: bool, handshake_seconds: Optional[float] = None) -> int:
    if not has_ssl or not valid:
        return 0
    return min(100, 70 + handshake_bonus(handshake_seconds))


# ------------------------------------------------------------------
# Community / vendor signals
# ------------------------------------------------------------------

def user_report_score(report_count: int) -> int:
    """-10 per report, capped at -50."""
    return max(0, 100 - min(report_count * 10, 50))


def safe_browsing_score(is_safe: bool) -> int:
    return 100 if is_safe else 0


def classify_reputation(malicious: int, suspicious: int, rules: ReputationRules) -> Reputation:
    if malicious > rules.malicious_threshold:
        return Reputation.MALICIOUS
    if malicious > rules.suspicious_malicious_threshold or suspicious > rules.suspicious_threshold:
        return Reputation.SUSPICIOUS
    return Reputation.CLEAN
