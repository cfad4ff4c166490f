import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

CONFIG_FILE = Path(__file__).parent / "config.yaml"
DATA_DIR = Path(__file__).parent / "data"


def load_config(path: Path = CONFIG_FILE):
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


CONFIG = load_config()


def get_section(name: str) -> dict:
    return CONFIG.get(name, {}) or {}


# ENV variable
load_dotenv()

# External vendor API Keys
VIRUSTOTAL_API_KEY = os.getenv("VIRUSTOTAL_API_KEY", "")
GOOGLE_SAFE_BROWSING_API_KEY = os.getenv("GOOGLE_SAFE_BROWSING_API_KEY", "")

# General Settings
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "5"))
DETECTOR_TIMEOUT = float(os.getenv("DETECTOR_TIMEOUT", "10"))
CACHE_DIR = os.getenv("CACHE_DIR", ".cache")
RESULT_CACHE_TTL = int(os.getenv("RESULT_CACHE_TTL", "3600"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Backing stores
BLACKLIST_DB = os.getenv("BLACKLIST_DB", os.path.join(CACHE_DIR, "blacklist"))
REPORTS_DB = os.getenv("REPORTS_DB", os.path.join(CACHE_DIR, "reports"))
WHITELIST_DB = os.getenv("WHITELIST_DB", os.path.join(CACHE_DIR, "whitelist"))
EXCHANGES_FILE = os.getenv("EXCHANGES_FILE", str(DATA_DIR / "exchanges.yaml"))


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
