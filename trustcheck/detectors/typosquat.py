"""
Typosquatting / homograph detection against a list of legitimate sites.

The detector is pure: it only looks at the domain string and the
TyposquatRules it was built with.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from trustcheck.detectors.distance import levenshtein, similarity
from trustcheck.domain import registered_domain
from trustcheck.models import RiskLevel
from trustcheck.rules import TyposquatRules


@dataclass(frozen=True)
class TyposquatResult:
    is_phishing: bool
    confidence: int
    reason: str
    risk_level: RiskLevel
    pattern_type: str = "none"
    matched_brand: Optional[str] = None
    official_url: Optional[str] = None
    similar_sites: List[Dict[str, Any]] = field(default_factory=list)
    max_similarity: int = 0
    visual_attacks: List[Dict[str, Any]] = field(default_factory=list)
    suspicious_matches: List[str] = field(default_factory=list)
    penalty: int = 0
    keyword: Optional[str] = None

    def to_details(self) -> Dict[str, Any]:
        data = asdict(self)
        data["risk_level"] = self.risk_level.value
        return data


def brand_of(site: str) -> str:
    return site.split(".")[0].lower()


def _clamp(value: float) -> int:
    return int(max(0, min(100, value)))


class TyposquattingDetector:

    def __init__(self, rules: TyposquatRules):
        self.rules = rules

    # ---------------------------------------------------------------
    # Visual similarity (homoglyphs)
    # ---------------------------------------------------------------

    def _confusable(self, original: str, lookalike: str) -> bool:
        return lookalike in self.rules.confusables.get(original, ())

    def visual_penalty(self, domain: str, site: str) -> int:
        substitutions = 0
        if abs(len(domain) - len(site)) <= 1:
            for c1, c2 in zip(domain, site):
                if c1 != c2 and self._confusable(c1, c2):
                    substitutions += 1

        # Multi-character lookalikes (rn -> m) shift positions, compare whole strings
        lowered = domain.lower()
        for sequence, lookalikes in self.rules.confusables.items():
            if len(sequence) < 2 or sequence not in lowered:
                continue
            if any(lowered.replace(sequence, look) == site for look in lookalikes):
                substitutions += lowered.count(sequence)

        return substitutions * self.rules.substitution_penalty

    # ---------------------------------------------------------------
    # Brand abuse patterns
    # ---------------------------------------------------------------

    def _subdomain_hijack(self, domain: str) -> Optional[TyposquatResult]:
        """binance.com.evil.net: the brand sits left of someone else's domain."""
        root = registered_domain(domain)
        if root == domain or not domain.endswith("." + root):
            return None
        prefix = domain[: -len(root) - 1]

        for site in self.rules.legitimate_sites:
            brand = brand_of(site)
            if brand in prefix:
                return self._abuse_result(
                    site,
                    self.rules.subdomain_penalty,
                    10,
                    f"Subdomain hijacking detected - impersonating {brand}",
                    "subdomain_hijack",
                )
        return None

    def _find_keyword(self, parts: List[str]) -> Optional[str]:
        for keyword in self.rules.brand_keywords:
            if any(part == keyword or keyword in part for part in parts):
                return keyword
        return None

    def _hyphen_brand(self, domain: str) -> Optional[TyposquatResult]:
        """secure-binance.com, binance-login.com"""
        name = domain.split(".")[0]
        if "-" not in name:
            return None

        parts = name.split("-")
        for site in self.rules.legitimate_sites:
            brand = brand_of(site)
            for part in parts:
                if part == brand or (len(part) > 3 and levenshtein(part, brand) <= 1):
                    keyword = self._find_keyword(parts)
                    if keyword:
                        return self._abuse_result(
                            site,
                            self.rules.hyphen_keyword_penalty,
                            15,
                            f'Suspicious pattern: {brand} + "{keyword}"',
                            "hyphen_brand",
                            keyword=keyword,
                        )
                    return self._abuse_result(
                        site,
                        self.rules.hyphen_penalty,
                        15,
                        f"Hyphen brand pattern detected - impersonating {brand}",
                        "hyphen_brand",
                    )
        return None

    def _brand_keyword_combo(self, domain: str) -> Optional[TyposquatResult]:
        """binancelogin.com, loginbinance.com"""
        name = domain.split(".")[0]

        for site in self.rules.legitimate_sites:
            brand = brand_of(site)
            if len(brand) < 4:
                continue
            for keyword in self.rules.brand_keywords:
                for pattern in (f"{brand}{keyword}", f"{keyword}{brand}"):
                    if name == pattern or (len(name) > 5 and levenshtein(name, pattern) <= 2):
                        return self._abuse_result(
                            site,
                            self.rules.combo_penalty,
                            20,
                            f'Suspicious combo: {brand} + "{keyword}"',
                            "brand_keyword",
                            keyword=keyword,
                        )
        return None

    def _abuse_result(self, site, penalty, confidence, reason, pattern_type, keyword=None):
        return TyposquatResult(
            is_phishing=True,
            confidence=confidence,
            reason=reason,
            risk_level=RiskLevel.HIGH,
            pattern_type=pattern_type,
            matched_brand=brand_of(site),
            official_url=site,
            penalty=penalty,
            keyword=keyword,
        )

    # ---------------------------------------------------------------
    # Main analysis
    # ---------------------------------------------------------------

    def analyze(self, domain: str) -> TyposquatResult:
        """
        domain must already be cleaned (no scheme / www / path) but keep its
        original case.
        """
        lowered = domain.lower()
        sites = self.rules.legitimate_sites

        if lowered in sites:
            return TyposquatResult(
                is_phishing=False,
                confidence=100,
                reason="Exact match with legitimate site",
                risk_level=RiskLevel.LOW,
                pattern_type="exact",
                max_similarity=100,
            )

        for site in sites:
            if lowered.endswith("." + site):
                return TyposquatResult(
                    is_phishing=False,
                    confidence=100,
                    reason=f"Subdomain of legitimate site {site}",
                    risk_level=RiskLevel.LOW,
                    pattern_type="exact",
                    official_url=site,
                    max_similarity=100,
                )

        if self.rules.brand_abuse:
            for check in (self._subdomain_hijack, self._hyphen_brand, self._brand_keyword_combo):
                result = check(lowered)
                if result:
                    return result

        similar_sites = []
        visual_attacks = []
        penalty = 0
        min_distance = None
        closest = None

        for site in sites:
            distance = levenshtein(lowered, site)

            if min_distance is None or distance < min_distance:
                min_distance = distance
                closest = site

            visual = self.visual_penalty(domain, site)
            if visual > 0:
                visual_attacks.append({"site": site, "penalty": visual})
                penalty -= visual

            score = similarity(lowered, site, distance)
            if self.rules.min_similarity <= score < 100:
                similar_sites.append({"site": site, "similarity": int(score + 0.5), "distance": distance})

        if min_distance is not None:
            penalty += self.rules.distance_penalties.get(min_distance, 0)

        confidence = _clamp(100 + penalty)
        similar_sites.sort(key=lambda s: s["similarity"], reverse=True)
        max_similarity = similar_sites[0]["similarity"] if similar_sites else 0

        is_phishing = False
        reason = "No suspicious patterns detected"
        risk_level = RiskLevel.LOW
        pattern_type = "none"
        matched = None

        if visual_attacks:
            is_phishing = True
            matched = visual_attacks[0]["site"]
            reason = f"Visual similarity attack detected ({matched})"
            risk_level = RiskLevel.HIGH
            pattern_type = "visual"
        elif (
            min_distance is not None
            and min_distance <= self.rules.typosquat_max_distance
            and penalty < self.rules.typosquat_penalty_floor
        ):
            is_phishing = True
            matched = closest
            reason = f"Possible typosquatting of {closest}"
            risk_level = RiskLevel.HIGH if min_distance == 1 else RiskLevel.MEDIUM
            pattern_type = "typosquatting"
        elif similar_sites and max_similarity >= self.rules.high_similarity:
            is_phishing = True
            matched = similar_sites[0]["site"]
            reason = f"High similarity to legitimate site ({max_similarity}%)"
            risk_level = RiskLevel.MEDIUM
            pattern_type = "similarity"

        return TyposquatResult(
            is_phishing=is_phishing,
            confidence=confidence,
            reason=reason,
            risk_level=risk_level,
            pattern_type=pattern_type,
            matched_brand=brand_of(matched) if matched else None,
            official_url=matched,
            similar_sites=similar_sites[:3],
            max_similarity=max_similarity,
            visual_attacks=visual_attacks,
            suspicious_matches=[f"{s['similarity']}% similar to {s['site']}" for s in similar_sites],
            penalty=penalty,
        )
