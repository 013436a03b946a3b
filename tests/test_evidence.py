"""
Tests for the ordered evidence chain (analytics.evidence.run_evidence_chain).
"""

from __future__ import annotations

import pytest

from backend_rwa.analytics.evidence import Evidence, Outcome, run_evidence_chain


def test_first_decisive_source_wins():
    """A failing source stops the chain; later sources are never called."""
    called: list[str] = []

    def later() -> Evidence:
        called.append("later")
        return Evidence.passed("later")

    result = run_evidence_chain(
        [
            ("quiet", Evidence.no_finding),
            ("fails", lambda: Evidence.failed("bad thing")),
            ("later", later),
        ],
        default_detail="clean",
    )
    assert result.passed is False
    assert result.details == "bad thing"
    assert called == []


def test_all_inconclusive_passes_with_default_detail():
    """With no decisive source the chain passes with the default detail."""
    result = run_evidence_chain(
        [("a", Evidence.no_finding), ("b", Evidence.no_finding)],
        default_detail="clean",
    )
    assert result.passed is True
    assert result.details == "clean"
    assert result.inconclusive_sources == ()


def test_unavailable_sources_are_recorded():
    """Only sources that could not be consulted are listed, in order."""
    result = run_evidence_chain(
        [
            ("service_a", lambda: Evidence.source_unavailable("timeout")),
            ("heuristic", Evidence.no_finding),
            ("service_b", lambda: Evidence.source_unavailable("no key")),
        ],
        default_detail="clean",
    )
    assert result.passed is True
    assert result.inconclusive_sources == ("service_a", "service_b")


def test_unavailable_recorded_before_decisive_failure():
    """Sources skipped before a decisive failure are still recorded."""
    result = run_evidence_chain(
        [
            ("service_a", lambda: Evidence.source_unavailable()),
            ("heuristic", lambda: Evidence.failed("matched")),
        ],
        default_detail="clean",
    )
    assert result.passed is False
    assert result.inconclusive_sources == ("service_a",)


def test_evidence_decisive_flags():
    """Only pass and fail are decisive; unavailable is inconclusive."""
    assert Evidence.passed("ok").decisive
    assert Evidence.failed("no").decisive
    assert not Evidence.no_finding().decisive
    unavailable = Evidence.source_unavailable("down")
    assert not unavailable.decisive
    assert unavailable.unavailable
    assert unavailable.outcome is Outcome.INCONCLUSIVE


def test_source_exceptions_propagate():
    """The chain does not swallow errors; the owning checker contains them."""

    def boom() -> Evidence:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run_evidence_chain([("boom", boom)], default_detail="clean")
