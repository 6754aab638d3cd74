"""
Terminal renderer using Rich.

Outputs color-coded audit reports to the terminal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from a11ycheck.domain.models import Impact

if TYPE_CHECKING:
    from a11ycheck.domain.keyboard import KeyboardTestResult
    from a11ycheck.domain.models import RuleInfo, Violation
    from a11ycheck.domain.report import AuditReport


class TerminalRenderer:
    """
    Renders audit reports to the terminal using Rich.

    Provides color-coded output with impact indicators,
    tables, and links to remediation docs.
    """

    IMPACT_COLORS = {
        Impact.CRITICAL: "red bold",
        Impact.SERIOUS: "red",
        Impact.MODERATE: "yellow",
        Impact.MINOR: "blue",
    }

    def __init__(
        self,
        console: Console | None = None,
        show_nodes: bool = False,
        show_help: bool = True,
    ) -> None:
        """
        Initialize the terminal renderer.

        Args:
            console: Rich console to use (creates new one if None).
            show_nodes: Whether to list every affected element.
            show_help: Whether to show the remediation link.
        """
        self.console = console or Console()
        self.show_nodes = show_nodes
        self.show_help = show_help

    def render(self, report: AuditReport) -> None:
        """
        Render an audit report to the terminal.

        Args:
            report: The audit report to render.
        """
        self._render_header(report)
        self._render_summary(report)

        violations = report.all_violations
        if violations:
            self.console.print()
            self.console.print("[bold]Violations:[/bold]")
            self.console.print()
            for i, violation in enumerate(violations, 1):
                self._render_violation(violation, i)
        else:
            self.console.print("\n[green]✓ No accessibility violations found![/green]\n")

        if report.keyboard is not None:
            self.render_keyboard(report.keyboard)

        self._render_footer(report)

    def render_keyboard(self, result: KeyboardTestResult) -> None:
        """Render the keyboard walk results."""
        table = Table(title="Keyboard navigation", show_header=False, box=None, padding=(0, 2))
        table.add_column("Check", style="bold")
        table.add_column("Count", justify="right")
        table.add_row("Focusable elements", str(result.total_focusable_elements))
        table.add_row("Elements tested", str(result.tested_elements))
        table.add_row(
            "Keyboard traps",
            Text(str(len(result.keyboard_traps)), style="red bold" if result.keyboard_traps else ""),
        )
        table.add_row(
            "Failed dialog escapes",
            Text(
                str(len(result.failed_dialog_escapes)),
                style="red" if result.failed_dialog_escapes else "",
            ),
        )
        table.add_row(
            "Unfocusable interactive",
            Text(
                str(len(result.unfocusable_interactive)),
                style="yellow" if result.unfocusable_interactive else "",
            ),
        )
        table.add_row("Button activations", str(len(result.button_activations)))

        self.console.print()
        self.console.print(table)
        if result.stop_reason:
            self.console.print(f"  [dim]{result.stop_reason}[/dim]")
        for trap in result.keyboard_traps:
            self.console.print(f"  [red]✗ {trap.selector}[/red] [dim]{trap.issue}[/dim]")
        self.console.print()

    def render_rules(self, rules: list[RuleInfo]) -> None:
        table = Table(title=f"axe-core rules ({len(rules)})")
        table.add_column("Rule", style="cyan")
        table.add_column("Help")
        table.add_column("Tags", style="dim")
        for rule in rules:
            table.add_row(rule.rule_id, rule.help, ", ".join(rule.tags))
        self.console.print(table)

    def _render_header(self, report: AuditReport) -> None:
        engines = ", ".join(e.engine for e in report.engines) or "none"
        self.console.print()
        self.console.print(
            Panel(
                f"[bold]Accessibility Audit[/bold]\n"
                f"Target: [cyan]{report.target}[/cyan]\n"
                f"Engines: {engines} | WCAG: {report.wcag_level or '-'}\n"
                f"Audit ID: [dim]{report.audit_id}[/dim]",
                title="a11ycheck",
                border_style="blue",
            )
        )

    def _render_summary(self, report: AuditReport) -> None:
        summary = report.summary

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Impact", style="bold")
        table.add_column("Count", justify="right")

        for impact in (Impact.CRITICAL, Impact.SERIOUS, Impact.MODERATE, Impact.MINOR):
            count = getattr(summary, impact.value)
            if count > 0:
                style = self.IMPACT_COLORS[impact]
                table.add_row(Text(impact.value.upper(), style=style), Text(str(count), style=style))
        if summary.unknown > 0:
            table.add_row(Text("UNKNOWN", style="dim"), Text(str(summary.unknown), style="dim"))

        table.add_row("", "")
        table.add_row(Text("Passes", style="green"), str(report.passes))
        table.add_row(Text("Incomplete", style="yellow"), str(len(report.incomplete)))
        table.add_row(Text("Inapplicable", style="dim"), str(report.inapplicable))

        self.console.print()
        self.console.print(table)

    def _render_violation(self, violation: Violation, index: int) -> None:
        color = self.IMPACT_COLORS.get(violation.impact, "dim") if violation.impact else "dim"
        impact = violation.impact.value if violation.impact else "unknown"

        self.console.print(
            f"{index}. [{color}]{impact.upper()}[/] [bold]{violation.help or violation.id}[/bold]"
        )

        rule_info = f"  Rule: [cyan]{violation.id}[/cyan]"
        if violation.engine:
            rule_info += f" ({violation.engine})"
        if violation.wcag_tags:
            rule_info += f" [dim]{', '.join(violation.wcag_tags)}[/dim]"
        self.console.print(rule_info)
        self.console.print(f"  Affected elements: {len(violation.nodes)}")

        if self.show_nodes:
            for node in violation.nodes:
                html = node.html if len(node.html) <= 80 else node.html[:77] + "..."
                self.console.print(f"    [dim]{html}[/dim]")

        if self.show_help and violation.help_url:
            self.console.print(f"  [green]→ {violation.help_url}[/green]")

        self.console.print()

    def _render_footer(self, report: AuditReport) -> None:
        if report.all_violations:
            status = "[red]✗ VIOLATIONS FOUND[/red]"
        else:
            status = "[green]✓ PASSED[/green]"

        self.console.print(
            f"Status: {status} | "
            f"Duration: {report.duration_ms:.1f}ms | "
            f"Tags: {', '.join(report.tags) or 'all rules'}"
        )
        self.console.print()


def render_report(report: AuditReport, **kwargs) -> None:
    """
    Convenience function to render a report to terminal.

    Args:
        report: The audit report to render.
        **kwargs: Options passed to TerminalRenderer.
    """
    renderer = TerminalRenderer(**kwargs)
    renderer.render(report)
