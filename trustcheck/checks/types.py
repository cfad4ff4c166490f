from enum import Enum


class RequestType(str, Enum):
    GENERAL = "general"
    CRYPTO = "crypto"


class Stage(str, Enum):
    GATE = "gate"
    DETECTOR = "detector"


class ConfigCat(str, Enum):
    WEIGHTS = "weights"
    VERDICT = "verdict"
    REPUTATION = "reputation"
    TYPOSQUATTING = "typosquatting"
    PATTERNS = "patterns"


class Category(str, Enum):
    REPUTATION = "reputation"
    REGISTRY = "registry"
    WHOIS = "whois"
    TLS = "tls"
    HEURISTICS = "heuristics"
    COMMUNITY = "community"
    OTHER = "other"
