"""Global pytest configuration."""

import os
import tempfile

# Keep the disk cache out of the working tree and away from real keys.
os.environ["CACHE_DIR"] = tempfile.mkdtemp(prefix="trustcheck-test-")
os.environ["VIRUSTOTAL_API_KEY"] = ""
os.environ["GOOGLE_SAFE_BROWSING_API_KEY"] = ""

import pytest  # noqa: E402

from trustcheck.models import ExchangeRecord  # noqa: E402
from trustcheck.rules import load_rules  # noqa: E402
from trustcheck.sources.stores import ExchangeRegistry  # noqa: E402


@pytest.fixture(scope="session")
def rules():
    return load_rules()


@pytest.fixture
def exchanges():
    return ExchangeRegistry([
        ExchangeRecord(id="binance", name="Binance", trust_score=10, trust_score_rank=1,
                       url="https://www.binance.com/"),
        ExchangeRecord(id="upbit", name="Upbit", trust_score=9, trust_score_rank=13,
                       url="https://upbit.com/"),
        ExchangeRecord(id="gate", name="Gate.io", trust_score=10, trust_score_rank=7,
                       url="https://gate.io/"),
        ExchangeRecord(id="dead", name="Dead Exchange", url="https://deadex.com/", is_active=False),
    ])
