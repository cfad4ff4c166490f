from dataclasses import dataclass
from typing import Any

from trustcheck.checks.base import Check, CheckContext
from trustcheck.checks.types import Stage
from trustcheck.models import CheckResult


@dataclass(frozen=True)
class GateOutcome:
    """
    result:   the check shown in the final ValidationResult
    terminal: stop the pipeline and answer with this result alone
    record:   the matched record (blacklist entry, exchange...)
    persist:  the record came from an outside feed and should be stored
    """

    result: CheckResult
    terminal: bool = False
    record: Any = None
    persist: bool = False


class Gate(Check):
    """A check that runs before the detectors and may end the request."""

    stage = Stage.GATE

    def evaluate(self, ctx: CheckContext) -> GateOutcome:
        raise NotImplementedError()

    def run(self, ctx: CheckContext) -> CheckResult:
        return self.evaluate(ctx).result
