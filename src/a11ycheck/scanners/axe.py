"""
axe-core scanner.

axe-core reports violations natively in the common record shape, so
normalization is a straight validation of its output.
"""

from __future__ import annotations

from typing import Any

from a11ycheck.adapters import dom_scripts
from a11ycheck.domain.models import RuleInfo, Violation
from a11ycheck.domain.report import EngineReport
from a11ycheck.scanners.base import BaseScanner, ScanOptions, ScriptPage


def axe_run_options(options: ScanOptions) -> dict[str, Any]:
    """Options object passed to ``axe.run``."""
    if not options.tags:
        return {}
    return {"runOnly": {"type": "tag", "values": options.tags}}


def parse_axe_results(raw: dict[str, Any]) -> EngineReport:
    """Validate the summary returned by the in-page axe run."""
    return EngineReport(
        engine=AxeScanner.engine_id,
        violations=[_violation(item) for item in raw.get("violations") or []],
        incomplete=[_violation(item) for item in raw.get("incomplete") or []],
        passes=int(raw.get("passes") or 0),
        inapplicable=int(raw.get("inapplicable") or 0),
        engine_version=raw.get("version"),
    )


def _violation(item: dict[str, Any]) -> Violation:
    nodes = [
        {
            "html": node.get("html", ""),
            "target": [str(t) for t in node.get("target") or []],
            "failureSummary": node.get("failureSummary"),
        }
        for node in item.get("nodes") or []
    ]
    return Violation.model_validate(
        {
            "id": item["id"],
            "impact": item.get("impact"),
            "tags": item.get("tags") or [],
            "description": item.get("description", ""),
            "help": item.get("help", ""),
            "helpUrl": item.get("helpUrl", ""),
            "nodes": nodes,
            "engine": AxeScanner.engine_id,
        }
    )


class AxeScanner(BaseScanner):
    """Runs Deque axe-core inside the page."""

    engine_id = "axe"
    name = "axe-core"

    async def _run(self, page: ScriptPage, options: ScanOptions) -> EngineReport:
        raw = await page.evaluate(dom_scripts.AXE_RUN, axe_run_options(options))
        return parse_axe_results(raw or {})

    async def rules(self, page: ScriptPage, tags: list[str] | None = None) -> list[RuleInfo]:
        """
        List axe-core rules, optionally only those carrying any of ``tags``.

        Args:
            page: Any loaded page; a blank one is enough.
            tags: Tag filter.

        Returns:
            Rule metadata in axe-core order.
        """
        await self.inject(page)
        raw = await page.evaluate(dom_scripts.AXE_RULES, tags or [])
        return [RuleInfo.model_validate(rule) for rule in raw or []]
