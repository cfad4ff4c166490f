"""
Reduction of check results to a ValidationResult.

combine() is the weighted mean over available checks; the *_result
builders produce the three possible answers (blacklisted, verified
exchange, scored).
"""

from typing import Iterable, List, Mapping

from trustcheck.models import BlacklistRecord, CheckResult, ExchangeRecord, Status, ValidationResult
from trustcheck.rules import VerdictRules

STATUS_SENTENCES = {
    Status.DANGER: "This site is likely dangerous.",
    Status.WARNING: "This site requires caution.",
    Status.SAFE: "This site appears to be safe.",
}


def combine(checks: Iterable[CheckResult], neutral_score: int = 50) -> int:
    total_weight = 0.0
    weighted = 0.0

    for check in checks:
        if not check.available or check.weight <= 0:
            continue
        total_weight += check.weight
        weighted += check.score * check.weight

    if total_weight == 0:
        return neutral_score
    return int(round(weighted / total_weight))


def status_for(score: int, rules: VerdictRules = VerdictRules()) -> Status:
    if score >= rules.safe_threshold:
        return Status.SAFE
    if score >= rules.warning_threshold:
        return Status.WARNING
    return Status.DANGER


def summary_for(domain: str, score: int, status: Status) -> str:
    return f"Security score for {domain} is {score}/100. {STATUS_SENTENCES[status]}"


def _failed(checks: Mapping[str, CheckResult], name: str) -> bool:
    check = checks.get(name)
    return check is not None and check.available and not check.passed


def recommendations_for(checks: Mapping[str, CheckResult], final_score: int,
                        rules: VerdictRules = VerdictRules()) -> List[str]:
    recs = []

    if final_score < rules.warning_threshold:
        recs.append("Do not trust this site")

    if _failed(checks, "ssl"):
        recs.append("No secure connection. Do not enter personal information")

    whois = checks.get("whois")
    if whois is not None and whois.available and whois.score < 30:
        recs.append("Recently registered domain. Exercise caution")

    if _failed(checks, "safe_browsing"):
        recs.append("Security threats detected")

    if _failed(checks, "user_reports"):
        count = checks["user_reports"].details.get("report_count", 0)
        recs.append(f"This site has {count} user report(s). Proceed with caution")

    if _failed(checks, "typosquatting"):
        official = checks["typosquatting"].details.get("official_url")
        if official:
            recs.append(f"This may be a fake site. Use the official site: {official}")
        else:
            recs.append("This domain imitates a well-known site")

    if not recs and final_score >= rules.safe_threshold:
        recs.append("Site appears to be safe")

    return recs


def scored_result(domain: str, original_input: str, checks: Mapping[str, CheckResult],
                  rules: VerdictRules = VerdictRules(), whitelisted: bool = False) -> ValidationResult:
    final_score = combine(checks.values(), rules.neutral_score)
    if whitelisted:
        final_score = min(100, final_score + rules.whitelist_bonus)
    status = status_for(final_score, rules)

    summary = summary_for(domain, final_score, status)
    if whitelisted and status == Status.SAFE:
        summary = f"{domain} is a verified trusted domain. {summary}"

    return ValidationResult(
        domain=domain,
        original_input=original_input,
        final_score=final_score,
        status=status,
        checks=dict(checks),
        summary=summary,
        recommendations=recommendations_for(checks, final_score, rules),
        whitelisted=whitelisted,
    )


def blacklisted_result(domain: str, original_input: str, check: CheckResult,
                       record: BlacklistRecord) -> ValidationResult:
    brand = record.target_brand
    if brand:
        detail = f"{domain} is a confirmed {brand} impersonation site ({record.severity} risk)."
    else:
        detail = f"{domain} is blacklisted as {record.severity} risk: {record.reason}."

    return ValidationResult(
        domain=domain,
        original_input=original_input,
        final_score=0,
        status=Status.DANGER,
        checks={check.name: check},
        summary=f"Security score for {domain} is 0/100. {detail}",
        recommendations=[
            "This domain is confirmed malicious. Close this site immediately",
            "Do not enter any personal information, passwords or financial details",
            "This domain is in the security blacklist",
            f"This is NOT the official {brand} website" if brand
            else "This site has been reported for malicious activity",
            "For crypto, only use verified official exchange websites",
        ],
    )


def verified_exchange_result(domain: str, original_input: str, check: CheckResult,
                             record: ExchangeRecord) -> ValidationResult:
    return ValidationResult(
        domain=domain,
        original_input=original_input,
        final_score=100,
        status=Status.SAFE,
        checks={check.name: check},
        summary=f"Security score for {domain} is 100/100. {record.name} is a verified exchange.",
        recommendations=[
            "This is a recognized exchange",
            "Always check the address bar before logging in",
        ],
    )
