import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace
from typing import Dict, List, Optional

from trustcheck.cache import get_cache, set_cache
from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.blacklist import BlacklistCheck
from trustcheck.checks.exchange import ExchangeCheck
from trustcheck.checks.registry import build_checks
from trustcheck.checks.types import RequestType
from trustcheck.config import DETECTOR_TIMEOUT, RESULT_CACHE_TTL
from trustcheck.domain import clean_domain, normalize_domain
from trustcheck.errors import InvalidRequestError, StoreError
from trustcheck.models import BlacklistRecord, CheckResult, ValidationResult
from trustcheck.rules import Rules, load_rules
from trustcheck.scoring.verdict import blacklisted_result, scored_result, verified_exchange_result
from trustcheck.sources.safe_browsing import SafeBrowsingClient
from trustcheck.sources.stores import (
    BlacklistStore,
    ExchangeRegistry,
    InMemoryBlacklistStore,
    InMemoryUserReportStore,
    InMemoryWhitelistStore,
    UserReportStore,
    WhitelistStore,
)
from trustcheck.sources.tls import TLSProbe
from trustcheck.sources.virustotal import ReputationFeed
from trustcheck.sources.whois import RegistrationSource

logger = logging.getLogger(__name__)

TERMINAL_BUILDERS = {
    BlacklistCheck.name: blacklisted_result,
    ExchangeCheck.name: verified_exchange_result,
}


class Validator:
    """
    Scores one domain per validate() call:

        blacklist gate -> exchange gate (crypto only) -> result cache
        -> detectors in parallel -> weighted verdict

    All collaborators are injected; missing optional sources make the
    matching check unavailable rather than failing the request.
    """

    def __init__(
        self,
        rules: Optional[Rules] = None,
        blacklist: Optional[BlacklistStore] = None,
        exchanges: Optional[ExchangeRegistry] = None,
        reports: Optional[UserReportStore] = None,
        reputation_feed: Optional[ReputationFeed] = None,
        registration: Optional[RegistrationSource] = None,
        tls: Optional[TLSProbe] = None,
        safe_browsing: Optional[SafeBrowsingClient] = None,
        whitelist: Optional[WhitelistStore] = None,
        detector_timeout: float = DETECTOR_TIMEOUT,
        cache_ttl: int = RESULT_CACHE_TTL,
    ):
        self.rules = rules if rules is not None else load_rules()
        self.blacklist = blacklist if blacklist is not None else InMemoryBlacklistStore()
        self.exchanges = exchanges if exchanges is not None else ExchangeRegistry()
        self.reports = reports if reports is not None else InMemoryUserReportStore()
        self.whitelist = whitelist if whitelist is not None else InMemoryWhitelistStore()
        self.detector_timeout = detector_timeout
        self.cache_ttl = cache_ttl

        self.gates, self.detectors = build_checks(
            self.rules,
            self.blacklist,
            self.exchanges,
            self.reports,
            reputation_feed=reputation_feed,
            registration=registration,
            tls=tls,
            safe_browsing=safe_browsing,
        )

    # ---------------------------------------------------------

    def _persist(self, record: BlacklistRecord) -> None:
        try:
            if self.blacklist.insert(record):
                logger.info("Blacklisted %s from %s: %s", record.domain, record.data_source, record.reason)
        except StoreError as e:
            logger.warning("Could not persist blacklist record for %s: %s", record.domain, e)

    def _whitelisted(self, domain: str) -> bool:
        try:
            return self.whitelist.contains(domain)
        except StoreError as e:
            logger.warning("Whitelist store unavailable for %s: %s", domain, e)
            return False

    def _run_detectors(self, ctx: CheckContext) -> Dict[str, CheckResult]:
        detectors: List[Check] = [d for d in self.detectors if d.applies_to(ctx.request_type)]
        results: Dict[str, CheckResult] = {}
        if not detectors:
            return results

        pool = ThreadPoolExecutor(max_workers=len(detectors), thread_name_prefix="trustcheck")
        try:
            futures = {pool.submit(d.run, ctx): d for d in detectors}
            _, pending = wait(futures, timeout=self.detector_timeout)
        finally:
            # Stragglers keep running in the background, their results are dropped
            pool.shutdown(wait=False, cancel_futures=True)

        for future, check in futures.items():
            if future in pending:
                logger.warning("%s timed out for %s", check.name, ctx.domain)
                results[check.name] = check.unavailable(
                    f"{check.name} timed out after {self.detector_timeout}s"
                )
                continue
            try:
                results[check.name] = future.result()
            except Exception as e:  # noqa: BLE001
                logger.warning("%s crashed for %s: %s", check.name, ctx.domain, e)
                results[check.name] = check.unavailable(f"{check.name} crashed: {e}")

        return results

    # ---------------------------------------------------------

    def validate(self, domain: str, request_type: str = "general") -> ValidationResult:
        try:
            request_type = RequestType(request_type)
        except ValueError:
            raise InvalidRequestError(f"Unknown request type: {request_type!r}") from None

        cleaned = clean_domain(domain)
        ctx = CheckContext(domain=normalize_domain(cleaned), cleaned=cleaned, request_type=request_type)
        logger.debug("Validating %s (%s)", ctx.domain, request_type.value)

        checks: Dict[str, CheckResult] = {}

        for gate in self.gates:
            if not gate.applies_to(request_type):
                continue

            try:
                outcome = gate.evaluate(ctx)
            except Exception as e:  # noqa: BLE001
                logger.warning("%s crashed for %s: %s", gate.name, ctx.domain, e)
                checks[gate.name] = gate.unavailable(f"{gate.name} crashed: {e}")
                continue

            if outcome.persist:
                self._persist(outcome.record)

            if outcome.terminal:
                logger.info("%s short-circuited %s", gate.name, ctx.domain)
                return TERMINAL_BUILDERS[gate.name](ctx.domain, domain, outcome.result, outcome.record)

            checks[gate.name] = outcome.result

        cache_key = f"result:{request_type.value}:{ctx.domain}"
        if self.cache_ttl > 0:
            cached = get_cache(cache_key)
            if cached is not None:
                return replace(cached, original_input=domain, cached=True)

        checks.update(self._run_detectors(ctx))
        result = scored_result(
            ctx.domain, domain, checks, self.rules.verdict, whitelisted=self._whitelisted(ctx.domain)
        )

        degraded = [c.name for c in result.checks.values() if c.transient]
        if degraded:
            logger.info("Not caching %s, unavailable: %s", ctx.domain, ", ".join(degraded))
        else:
            set_cache(cache_key, result, expire=self.cache_ttl)
        return result
