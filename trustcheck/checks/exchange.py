import logging

from trustcheck.checks.base import CheckContext
from trustcheck.checks.gate import Gate, GateOutcome
from trustcheck.checks.types import Category, RequestType
from trustcheck.errors import StoreError
from trustcheck.sources.stores import ExchangeRegistry

logger = logging.getLogger(__name__)


class ExchangeCheck(Gate):
    name = "exchange"
    label = "Exchange Verification"
    category = Category.REGISTRY
    request_types = (RequestType.CRYPTO,)

    def __init__(self, registry: ExchangeRegistry, weight: float = 1.0):
        super().__init__(weight)
        self.registry = registry

    def evaluate(self, ctx: CheckContext) -> GateOutcome:
        try:
            exchange = self.registry.lookup(ctx.domain)
        except StoreError as e:
            logger.warning("Exchange registry unavailable for %s: %s", ctx.domain, e)
            exchange = None

        if exchange is None:
            # Unverified: shown, but weight 0 keeps it out of the score
            return GateOutcome(self.result(
                0, passed=False,
                message="Not a verified exchange",
                details={"is_verified": False},
                weight=0,
            ))

        return GateOutcome(
            self.result(
                100, passed=True,
                message=f"Verified exchange: {exchange.name} (Trust rank #{exchange.trust_score_rank})",
                details={"is_verified": True, **exchange.to_dict()},
            ),
            terminal=True,
            record=exchange,
        )
