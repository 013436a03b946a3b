"""
Ordered evidence chain used by the signal checkers.

Each checker is a list of named evidence sources tried in precedence order.
A source returns Pass, Fail(detail) or Inconclusive; the first decisive
outcome becomes the check's verdict. When every source is inconclusive the
check passes with the checker's neutral detail.

Inconclusive comes in two flavours: "no finding" (the heuristic looked and
saw nothing) and "unavailable" (the source could not be consulted). Only
unavailable sources are recorded on the result, so reviewers can see when a
pass rests on missing evidence.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

import structlog

from backend_rwa.analytics.models import ValidationResult
from backend_rwa.rwa_logging import get_logger

logger = get_logger(__name__)


class Outcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    INCONCLUSIVE = "inconclusive"


@dataclass(frozen=True)
class Evidence:
    outcome: Outcome
    detail: str = ""
    unavailable: bool = False

    @classmethod
    def passed(cls, detail: str) -> Evidence:
        return cls(Outcome.PASS, detail)

    @classmethod
    def failed(cls, detail: str) -> Evidence:
        return cls(Outcome.FAIL, detail)

    @classmethod
    def no_finding(cls) -> Evidence:
        return cls(Outcome.INCONCLUSIVE)

    @classmethod
    def source_unavailable(cls, reason: str = "") -> Evidence:
        return cls(Outcome.INCONCLUSIVE, reason, unavailable=True)

    @property
    def decisive(self) -> bool:
        return self.outcome is not Outcome.INCONCLUSIVE


EvidenceSource = tuple[str, Callable[[], Evidence]]


def run_evidence_chain(
    sources: Iterable[EvidenceSource],
    *,
    default_detail: str,
    log: structlog.BoundLogger | None = None,
) -> ValidationResult:
    """
    Evaluate sources in order; the first decisive evidence wins.

    Sources are called lazily, so later (possibly networked) sources never run
    once an earlier one has decided. Exceptions are not caught here; the
    checker owning the chain converts them into an "unable to verify" result.
    log is the checker's project-bound logger (rwa_logging.bind_project).
    """
    log = log or logger
    unavailable: list[str] = []
    for name, source in sources:
        evidence = source()
        if evidence.decisive:
            log.debug(
                "evidence_decisive",
                source=name,
                outcome=evidence.outcome.value,
            )
            return ValidationResult(
                passed=evidence.outcome is Outcome.PASS,
                details=evidence.detail,
                inconclusive_sources=tuple(unavailable),
            )
        if evidence.unavailable:
            log.debug("evidence_source_unavailable", source=name, reason=evidence.detail)
            unavailable.append(name)
    return ValidationResult(
        passed=True,
        details=default_detail,
        inconclusive_sources=tuple(unavailable),
    )
