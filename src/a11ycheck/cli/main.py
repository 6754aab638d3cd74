"""
Main CLI entry point for a11ycheck.

Usage:
    a11ycheck serve
    a11ycheck scan https://example.com
    a11ycheck scan ./page.html --html --format json
    a11ycheck keyboard https://example.com
    a11ycheck rules --tag wcag2a
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import anyio
import typer
from rich.console import Console

from a11ycheck import __version__

app = typer.Typer(
    name="a11ycheck",
    help="a11ycheck — Web accessibility auditing (axe-core, IBM Equal Access, keyboard)",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    """Output format options."""

    terminal = "terminal"
    markdown = "markdown"
    json = "json"


class ImpactLevel(str, Enum):
    """Minimum impact that causes a non-zero exit."""

    critical = "critical"
    serious = "serious"
    moderate = "moderate"
    minor = "minor"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"a11ycheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log debug output to stderr.",
        ),
    ] = False,
) -> None:
    """
    a11ycheck — Web accessibility auditing

    Load a page in headless Chromium, run axe-core and/or IBM Equal Access
    against it, and walk it with the keyboard.

    Examples:

        a11ycheck scan https://example.com --engine both

        a11ycheck scan ./page.html --html --format json --output report.json

        a11ycheck serve
    """
    ctx.obj = {"verbose": verbose}


def _load_config(ctx: typer.Context):
    from a11ycheck.domain.config import AuditConfig
    from a11ycheck.domain.exceptions import ConfigError
    from a11ycheck.logging_config import configure

    try:
        config = AuditConfig.load()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {e.message}[/red]")
        raise typer.Exit(2)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    configure("DEBUG" if verbose else config.log_level)
    return config


def _target(target: str, html: bool):
    from a11ycheck.adapters.browser import PageTarget

    if not html:
        return PageTarget(url=target)

    path = Path(target)
    try:
        return PageTarget(html=path.read_text(encoding="utf-8"))
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(2)


def _check_output(format: OutputFormat, output: Path | None) -> None:
    if output and format is OutputFormat.terminal:
        err_console.print(
            "[red]--output needs --format markdown or --format json[/red]"
        )
        raise typer.Exit(2)


def _emit(text: str, output: Path | None) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[green]Report written to {output}[/green]")
    else:
        console.print(text, markup=False, highlight=False, soft_wrap=True)


@app.command()
def serve(ctx: typer.Context) -> None:
    """
    Run the MCP server over stdio.

    Configuration comes from A11YCHECK_* environment variables and the
    optional YAML file named by A11YCHECK_CONFIG_FILE.
    """
    from a11ycheck.server import build_server

    config = _load_config(ctx)
    build_server(config).run(transport="stdio")


@app.command()
def scan(
    ctx: typer.Context,
    target: Annotated[
        str,
        typer.Argument(help="URL to audit, or a local HTML file with --html."),
    ],
    html: Annotated[
        bool,
        typer.Option("--html", help="Treat TARGET as a local HTML file."),
    ] = False,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format."),
    ] = OutputFormat.terminal,
    engine: Annotated[
        Optional[str],
        typer.Option("--engine", "-e", help="axe, ibm or both."),
    ] = None,
    level: Annotated[
        Optional[str],
        typer.Option("--level", "-l", help="WCAG level, e.g. wcag21aa or AA."),
    ] = None,
    tag: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="axe-core tag to run (repeatable)."),
    ] = None,
    keyboard: Annotated[
        Optional[bool],
        typer.Option("--keyboard/--no-keyboard", help="Run the keyboard walk."),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file for markdown or json (default: stdout)."),
    ] = None,
    fail_on: Annotated[
        ImpactLevel,
        typer.Option("--fail-on", help="Minimum impact to cause non-zero exit."),
    ] = ImpactLevel.serious,
) -> None:
    """
    Audit a page for accessibility violations.

    Examples:

        a11ycheck scan https://example.com

        a11ycheck scan https://example.com --engine both --level wcag22aa

        a11ycheck scan ./page.html --html --format markdown --no-keyboard
    """
    from a11ycheck.domain.exceptions import A11yCheckError
    from a11ycheck.domain.models import Impact
    from a11ycheck.engine.auditor import Auditor, AuditRequest
    from a11ycheck.renderers.json_renderer import JsonRenderer
    from a11ycheck.renderers.markdown import MarkdownRenderer
    from a11ycheck.renderers.terminal import TerminalRenderer

    _check_output(format, output)
    config = _load_config(ctx)
    page_target = _target(target, html)
    request = AuditRequest(tags=tag or None, engine=engine, wcag_level=level, keyboard=keyboard)
    auditor = Auditor(config)

    try:
        report = anyio.run(auditor.audit, page_target, request)
    except A11yCheckError as e:
        err_console.print(f"[red]Audit failed: {e.message}[/red]")
        raise typer.Exit(2)

    match format:
        case OutputFormat.terminal:
            TerminalRenderer(console=console).render(report)
        case OutputFormat.markdown:
            _emit(MarkdownRenderer().render(report), output)
        case OutputFormat.json:
            _emit(JsonRenderer().render(report), output)

    if report.violations_at_or_above(Impact(fail_on.value)):
        raise typer.Exit(1)


@app.command()
def keyboard(
    ctx: typer.Context,
    target: Annotated[
        str,
        typer.Argument(help="URL to test, or a local HTML file with --html."),
    ],
    html: Annotated[
        bool,
        typer.Option("--html", help="Treat TARGET as a local HTML file."),
    ] = False,
    format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format."),
    ] = OutputFormat.terminal,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file for markdown or json (default: stdout)."),
    ] = None,
) -> None:
    """
    Run only the keyboard navigation test.

    Walks the Tab order, detects keyboard traps, checks that dialogs close
    with Escape, and lists interactive elements Tab cannot reach.
    """
    from a11ycheck.domain.exceptions import A11yCheckError
    from a11ycheck.engine.auditor import Auditor
    from a11ycheck.renderers.json_renderer import JsonRenderer
    from a11ycheck.renderers.markdown import MarkdownRenderer
    from a11ycheck.renderers.terminal import TerminalRenderer

    _check_output(format, output)
    config = _load_config(ctx)
    page_target = _target(target, html)

    try:
        result = anyio.run(Auditor(config).keyboard_test, page_target)
    except A11yCheckError as e:
        err_console.print(f"[red]Keyboard test failed: {e.message}[/red]")
        raise typer.Exit(2)

    match format:
        case OutputFormat.terminal:
            TerminalRenderer(console=console).render_keyboard(result)
        case OutputFormat.markdown:
            _emit(MarkdownRenderer().render_keyboard(result, page_target.label), output)
        case OutputFormat.json:
            _emit(JsonRenderer().render_keyboard(result), output)

    if result.has_issues:
        raise typer.Exit(1)


@app.command()
def rules(
    ctx: typer.Context,
    tag: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Only rules carrying this tag (repeatable)."),
    ] = None,
) -> None:
    """
    List axe-core rules.

    Shows rule IDs, help text and tags.
    """
    from a11ycheck.domain.exceptions import A11yCheckError
    from a11ycheck.engine.auditor import Auditor
    from a11ycheck.renderers.terminal import TerminalRenderer

    config = _load_config(ctx)

    try:
        listed = anyio.run(Auditor(config).rules, tag or None)
    except A11yCheckError as e:
        err_console.print(f"[red]Cannot list rules: {e.message}[/red]")
        raise typer.Exit(2)

    TerminalRenderer(console=console).render_rules(listed)
    console.print(f"\nTotal: {len(listed)} rules")


if __name__ == "__main__":
    app()
