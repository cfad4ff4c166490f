"""
Immutable reference data for the detectors.

Everything here is read from config.yaml once and frozen; detectors receive
these objects through their constructors instead of reading module globals.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from trustcheck.checks.types import ConfigCat
from trustcheck.config import get_section


@dataclass(frozen=True)
class TyposquatRules:
    legitimate_sites: Tuple[str, ...]
    confusables: Mapping[str, Tuple[str, ...]]
    brand_keywords: Tuple[str, ...] = ()
    brand_abuse: bool = True
    distance_penalties: Mapping[int, int] = field(
        default_factory=lambda: MappingProxyType({1: -50, 2: -30, 3: -10})
    )
    substitution_penalty: int = 20
    min_similarity: float = 60
    high_similarity: float = 80
    typosquat_max_distance: int = 2
    typosquat_penalty_floor: int = -25
    subdomain_penalty: int = -70
    hyphen_keyword_penalty: int = -65
    hyphen_penalty: int = -55
    combo_penalty: int = -55

    def with_extra_sites(self, sites: Iterable[str]) -> "TyposquatRules":
        merged = list(self.legitimate_sites)
        for site in sites:
            site = site.lower()
            if site and site not in merged:
                merged.append(site)
        return replace(self, legitimate_sites=tuple(merged))


@dataclass(frozen=True)
class PatternRuleset:
    name: str
    factors: Tuple[str, ...]
    factor_weights: Mapping[str, int]
    keywords: Tuple[str, ...]
    keyword_threshold: int = 1
    suspicious_tlds: frozenset = frozenset()


@dataclass(frozen=True)
class VerdictRules:
    safe_threshold: int = 80
    warning_threshold: int = 50
    neutral_score: int = 50
    whitelist_bonus: int = 20


@dataclass(frozen=True)
class ReputationRules:
    malicious_threshold: int = 5
    suspicious_malicious_threshold: int = 0
    suspicious_threshold: int = 2


@dataclass(frozen=True)
class Rules:
    typosquatting: TyposquatRules
    rulesets: Mapping[str, PatternRuleset]
    rulesets_by_type: Mapping[str, str]
    verdict: VerdictRules
    reputation: ReputationRules
    weights: Mapping[str, float]

    def ruleset_for(self, request_type: str) -> PatternRuleset:
        name = self.rulesets_by_type.get(request_type, "general")
        return self.rulesets[name]


def _typosquat_rules(section: dict) -> TyposquatRules:
    confusables = {
        str(key): tuple(str(v) for v in values)
        for key, values in (section.get("confusables") or {}).items()
    }
    penalties = {
        int(k): int(v) for k, v in (section.get("distance_penalties") or {1: -50, 2: -30, 3: -10}).items()
    }
    scalars = {
        key: section[key]
        for key in (
            "brand_abuse", "substitution_penalty",
            "min_similarity", "high_similarity", "typosquat_max_distance",
            "typosquat_penalty_floor", "subdomain_penalty",
            "hyphen_keyword_penalty", "hyphen_penalty", "combo_penalty",
        )
        if key in section
    }
    return TyposquatRules(
        legitimate_sites=tuple(s.lower() for s in section.get("legitimate_sites", [])),
        confusables=MappingProxyType(confusables),
        brand_keywords=tuple(section.get("brand_keywords", [])),
        distance_penalties=MappingProxyType(penalties),
        **scalars,
    )


def _rulesets(section: dict) -> Dict[str, PatternRuleset]:
    weights = MappingProxyType(dict(section.get("factor_weights") or {}))
    tlds = frozenset(t.lower().lstrip(".") for t in section.get("suspicious_tlds", []))

    rulesets = {}
    for name, conf in (section.get("rulesets") or {}).items():
        rulesets[name] = PatternRuleset(
            name=name,
            factors=tuple(conf.get("factors", [])),
            factor_weights=weights,
            keywords=tuple(conf.get("keywords", [])),
            keyword_threshold=int(conf.get("keyword_threshold", 1)),
            suspicious_tlds=tlds,
        )
    return rulesets


def load_rules(config: Optional[dict] = None) -> Rules:
    if config is None:
        sections = {cat.value: get_section(cat.value) for cat in ConfigCat}
    else:
        sections = {cat.value: config.get(cat.value) or {} for cat in ConfigCat}

    patterns = sections[ConfigCat.PATTERNS.value]

    return Rules(
        typosquatting=_typosquat_rules(sections[ConfigCat.TYPOSQUATTING.value]),
        rulesets=MappingProxyType(_rulesets(patterns)),
        rulesets_by_type=MappingProxyType(dict(patterns.get("rulesets_by_type") or {})),
        verdict=VerdictRules(**sections[ConfigCat.VERDICT.value]),
        reputation=ReputationRules(**sections[ConfigCat.REPUTATION.value]),
        weights=MappingProxyType(dict(sections[ConfigCat.WEIGHTS.value])),
    )
