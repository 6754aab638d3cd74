"""
Markdown renderer for a11ycheck.

Produces the text returned by the MCP tools: an audit report, a
stand-alone keyboard report, and the axe-core rule listing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from a11ycheck.domain.keyboard import KeyboardTestResult
    from a11ycheck.domain.models import RuleInfo, Violation
    from a11ycheck.domain.report import AuditReport


class MarkdownRenderer:
    """Renders audit results as Markdown."""

    def __init__(self, focus_order_limit: int = 50) -> None:
        """
        Args:
            focus_order_limit: Maximum focus-order entries to list.
        """
        self.focus_order_limit = focus_order_limit

    def render(self, report: AuditReport) -> str:
        lines = [
            "# Accessibility Test Results",
            "",
            f"**URL**: {report.target}",
            f"**Timestamp**: {report.audited_at.isoformat()}",
            f"**Engines**: {', '.join(e.engine for e in report.engines) or 'none'}",
        ]
        if report.wcag_level:
            lines.append(f"**WCAG Level**: {report.wcag_level}")
        lines += [
            "",
            "## Summary",
            f"- ✅ Passes: {report.passes}",
            f"- ❌ Violations: {len(report.violations)}",
            f"- ⚠️ Incomplete: {len(report.incomplete)}",
            f"- ℹ️ Inapplicable: {report.inapplicable}",
            "",
        ]

        if report.violations:
            lines += ["## Violations", ""]
            for index, violation in enumerate(report.violations, 1):
                lines += self._violation(violation, index)

        if report.incomplete:
            lines += ["## Incomplete Checks (Need Manual Review)", ""]
            for index, item in enumerate(report.incomplete, 1):
                lines.append(f"{index}. **{item.help or item.id}** ({len(item.nodes)} elements)")
            lines.append("")

        if report.keyboard is not None:
            lines += self._keyboard_section(report.keyboard, heading="##")

        return "\n".join(lines)

    def render_keyboard(self, result: KeyboardTestResult, target: str) -> str:
        """Stand-alone keyboard test report."""
        lines = ["# Keyboard Accessibility Test Results", "", f"**URL**: {target}", ""]
        lines += self._keyboard_section(result, heading="##", title=False)
        return "\n".join(lines)

    def render_rules(self, rules: list[RuleInfo], tags: list[str] | None = None) -> str:
        lines = ["# Axe-Core Accessibility Rules", ""]
        if tags:
            lines += [f"**Filtered by tags**: {', '.join(tags)}", ""]
        lines += [f"**Total rules**: {len(rules)}", ""]
        for index, rule in enumerate(rules, 1):
            lines += [
                f"## {index}. {rule.rule_id}",
                f"**Description**: {rule.description}",
                f"**Help**: {rule.help}",
                f"**Tags**: {', '.join(rule.tags)}",
                f"**Help URL**: {rule.help_url}",
                "",
            ]
        return "\n".join(lines)

    def _violation(self, violation: Violation, index: int) -> list[str]:
        lines = [
            f"### {index}. {violation.help or violation.id}",
            f"**Rule**: {violation.id}" + (f" ({violation.engine})" if violation.engine else ""),
            f"**Impact**: {violation.impact.value if violation.impact else 'unknown'}",
            f"**Description**: {violation.description}",
            f"**WCAG**: {', '.join(violation.wcag_tags) or '-'}",
            f"**Affected Elements**: {len(violation.nodes)}",
            "",
        ]
        for node_index, node in enumerate(violation.nodes, 1):
            lines.append(f"  {node_index}. `{node.html}`")
            lines.append(f"     Target: {' '.join(node.target)}")
            if node.failure_summary:
                lines.append(f"     {node.failure_summary}")
            lines.append("")
        if violation.help_url:
            lines += [f"**How to fix**: {violation.help_url}", ""]
        return lines

    def _keyboard_section(
        self, result: KeyboardTestResult, heading: str, title: bool = True
    ) -> list[str]:
        sub = heading + "#"
        lines: list[str] = []
        if title:
            lines += [f"{heading} Keyboard Accessibility", ""]
        lines += [
            f"- Focusable elements: {result.total_focusable_elements}",
            f"- Elements tested: {result.tested_elements}",
            f"- Keyboard traps: {len(result.keyboard_traps)}",
            f"- Unfocusable interactive elements: {len(result.unfocusable_interactive)}",
            f"- Dialog escape tests: {len(result.dialog_escapes)}",
            f"- Button activations: {len(result.button_activations)}",
        ]
        if result.stop_reason:
            lines.append(f"- Walk ended: {result.stop_reason}")
        lines.append("")

        if result.keyboard_traps:
            lines += [f"{sub} ❌ Keyboard Traps", ""]
            for trap in result.keyboard_traps:
                lines += [f"- `{trap.selector}`: {trap.issue}", f"  `{trap.html}`"]
            lines.append("")

        if result.dialog_escapes:
            lines += [f"{sub} Dialog Escape Tests", ""]
            for escape in result.dialog_escapes:
                mark = "✅" if escape.escaped_successfully else "❌"
                lines.append(f"- {mark} `{escape.dialog_selector}`: {escape.note}")
            lines.append("")

        if result.button_activations:
            lines += [f"{sub} Button Activations", ""]
            for activation in result.button_activations:
                flags = []
                if activation.triggered_dialog:
                    flags.append("opened dialog")
                if activation.expanded_content:
                    flags.append("toggled content")
                suffix = f" ({', '.join(flags)})" if flags else ""
                lines.append(f"- `{activation.selector}`{suffix}: {activation.note}")
            lines.append("")

        if result.unfocusable_interactive:
            lines += [f"{sub} ⚠️ Unfocusable Interactive Elements", ""]
            for element in result.unfocusable_interactive:
                role = f" (role: {element.role})" if element.role else ""
                lines.append(f"- `{element.selector}`{role}: `{element.html}`")
            lines.append("")

        if result.focus_order:
            lines += [f"{sub} Focus Order", ""]
            shown = result.focus_order[: self.focus_order_limit]
            for item in shown:
                lines.append(f"{item.index}. `{item.selector}`")
            hidden = len(result.focus_order) - len(shown)
            if hidden > 0:
                lines.append(f"... and {hidden} more")
            lines.append("")

        return lines


def render_markdown(report: AuditReport, **kwargs) -> str:
    """
    Convenience function to render a report as Markdown.

    Args:
        report: The audit report to render.
        **kwargs: Options passed to MarkdownRenderer.
    """
    return MarkdownRenderer(**kwargs).render(report)
