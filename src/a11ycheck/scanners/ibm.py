"""
IBM Equal Access scanner.

The IBM engine reports one result per (rule, element) with a level taxonomy
(violation, potentialviolation, recommendation, potentialrecommendation,
manual, pass). Results are grouped per rule id into violation records so
they read the same as axe-core output.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from a11ycheck.adapters import dom_scripts
from a11ycheck.domain.models import Impact, Violation, ViolationNode
from a11ycheck.domain.report import EngineReport
from a11ycheck.scanners.base import BaseScanner, ScanOptions, ScriptPage

HELP_URL = "https://able.ibm.com/rules/archives/latest/doc/en-US/{rule_id}.html"


class IbmLevel(str, Enum):
    """Result levels reported by the IBM engine."""

    VIOLATION = "violation"
    POTENTIAL_VIOLATION = "potentialviolation"
    RECOMMENDATION = "recommendation"
    POTENTIAL_RECOMMENDATION = "potentialrecommendation"
    MANUAL = "manual"
    PASS = "pass"


LEVEL_IMPACT = {
    IbmLevel.VIOLATION: Impact.SERIOUS,
    IbmLevel.POTENTIAL_VIOLATION: Impact.MODERATE,
    IbmLevel.RECOMMENDATION: Impact.MINOR,
    IbmLevel.POTENTIAL_RECOMMENDATION: Impact.MINOR,
}


def result_level(result: dict[str, Any]) -> IbmLevel | None:
    """
    Level of one raw engine result.

    The browser engine reports ``value: [policy, outcome]`` pairs such as
    ``["VIOLATION", "POTENTIAL"]``; the Node wrapper adds a ready-made
    ``level`` string. Either is accepted.
    """
    if result.get("level"):
        try:
            return IbmLevel(str(result["level"]).lower())
        except ValueError:
            return None

    value = result.get("value") or []
    if len(value) != 2:
        return None
    kind, outcome = str(value[0]).upper(), str(value[1]).upper()

    if outcome == "PASS":
        return IbmLevel.PASS
    if outcome == "MANUAL":
        return IbmLevel.MANUAL
    if kind == "VIOLATION":
        return IbmLevel.VIOLATION if outcome == "FAIL" else IbmLevel.POTENTIAL_VIOLATION
    if kind in ("RECOMMENDATION", "INFORMATION"):
        return IbmLevel.RECOMMENDATION if outcome == "FAIL" else IbmLevel.POTENTIAL_RECOMMENDATION
    return None


def normalize_ibm_results(
    results: list[dict[str, Any]],
    policy: str,
    include_recommendations: bool = False,
) -> EngineReport:
    """
    Group IBM results per rule id into violation records.

    Args:
        results: Raw per-element results from the engine.
        policy: Ruleset the engine ran, added to each record's tags.
        include_recommendations: Report recommendations as minor violations.

    Returns:
        EngineReport with violations, manual checks as incomplete, and
        pass counts.
    """
    reported = {IbmLevel.VIOLATION, IbmLevel.POTENTIAL_VIOLATION}
    if include_recommendations:
        reported |= {IbmLevel.RECOMMENDATION, IbmLevel.POTENTIAL_RECOMMENDATION}

    violations: dict[str, dict[str, Any]] = {}
    manual: dict[str, dict[str, Any]] = {}
    passed_rules: set[str] = set()

    for result in results:
        level = result_level(result)
        rule_id = str(result.get("ruleId") or "unknown")

        if level is IbmLevel.PASS:
            passed_rules.add(rule_id)
            continue
        if level is IbmLevel.MANUAL:
            groups = manual
        elif level in reported:
            groups = violations
        else:
            continue

        group = groups.setdefault(
            rule_id,
            {"message": result.get("message") or rule_id, "levels": [], "nodes": []},
        )
        group["levels"].append(level)
        group["nodes"].append(
            ViolationNode(
                html=result.get("snippet") or "",
                target=[(result.get("path") or {}).get("dom") or ""],
                failure_summary=result.get("message") or None,
            )
        )

    return EngineReport(
        engine=IbmScanner.engine_id,
        violations=[_record(rule_id, g, policy) for rule_id, g in violations.items()],
        incomplete=[_record(rule_id, g, policy) for rule_id, g in manual.items()],
        passes=len(passed_rules - violations.keys() - manual.keys()),
    )


def _record(rule_id: str, group: dict[str, Any], policy: str) -> Violation:
    levels: list[IbmLevel] = group["levels"]
    impacts = [LEVEL_IMPACT[level] for level in levels if level in LEVEL_IMPACT]
    return Violation(
        id=rule_id,
        impact=max(impacts) if impacts else None,
        tags=[policy] + sorted({f"ibm-{level.value}" for level in levels}),
        description=group["message"],
        help=group["message"],
        help_url=HELP_URL.format(rule_id=rule_id),
        nodes=group["nodes"],
        engine=IbmScanner.engine_id,
    )


class IbmScanner(BaseScanner):
    """Runs the IBM Equal Access engine (ace.js) inside the page."""

    engine_id = "ibm"
    name = "IBM Equal Access"

    async def _run(self, page: ScriptPage, options: ScanOptions) -> EngineReport:
        raw = await page.evaluate(dom_scripts.ACE_RUN, options.ibm_policy)
        return normalize_ibm_results(
            raw or [],
            policy=options.ibm_policy,
            include_recommendations=options.include_recommendations,
        )
