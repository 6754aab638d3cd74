"""
Unit tests for the command-line interface.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from a11ycheck import __version__
from a11ycheck.cli.main import app
from a11ycheck.domain.exceptions import ScannerError
from a11ycheck.domain.keyboard import KeyboardTestResult
from a11ycheck.domain.report import AuditReport

runner = CliRunner()


class StubAuditor:
    """Auditor double returning canned results."""

    report: AuditReport | None = None
    keyboard: KeyboardTestResult | None = None
    error: Exception | None = None
    calls: list[tuple] = []

    def __init__(self, config) -> None:
        self.config = config

    async def audit(self, target, request=None) -> AuditReport:
        StubAuditor.calls.append((target, request))
        if StubAuditor.error:
            raise StubAuditor.error
        return StubAuditor.report

    async def keyboard_test(self, target) -> KeyboardTestResult:
        StubAuditor.calls.append((target, None))
        return StubAuditor.keyboard


@pytest.fixture(autouse=True)
def isolated(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("A11YCHECK_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr("a11ycheck.logging_config.configure", lambda level="INFO": None)
    monkeypatch.setattr("a11ycheck.engine.auditor.Auditor", StubAuditor)
    monkeypatch.setattr(StubAuditor, "calls", [])
    monkeypatch.setattr(StubAuditor, "error", None)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_scan_markdown_fails_on_serious(
    monkeypatch: pytest.MonkeyPatch, sample_report: AuditReport
) -> None:
    monkeypatch.setattr(StubAuditor, "report", sample_report)

    result = runner.invoke(
        app,
        ["scan", "https://example.test/", "--format", "markdown", "-e", "both", "-t", "wcag2a"],
    )

    assert result.exit_code == 1
    assert "# Accessibility Test Results" in result.output
    target, request = StubAuditor.calls[0]
    assert target.url == "https://example.test/"
    assert request.engine == "both"
    assert request.tags == ["wcag2a"]


def test_scan_json_to_file(
    monkeypatch: pytest.MonkeyPatch, sample_report: AuditReport, tmp_path: Path
) -> None:
    monkeypatch.setattr(StubAuditor, "report", sample_report)
    out = tmp_path / "report.json"

    result = runner.invoke(
        app, ["scan", "https://example.test/", "-f", "json", "-o", str(out)]
    )

    assert result.exit_code == 1
    assert [v["id"] for v in json.loads(out.read_text())][0] == "image-alt"


@pytest.mark.parametrize("command", ["scan", "keyboard"])
def test_output_file_rejected_for_terminal_format(command: str, tmp_path: Path) -> None:
    out = tmp_path / "report.txt"

    result = runner.invoke(app, [command, "https://example.test/", "-o", str(out)])

    assert result.exit_code == 2
    assert StubAuditor.calls == []
    assert not out.exists()


def test_scan_clean_report_exits_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    page = tmp_path / "page.html"
    page.write_text("<html lang='en'><main>Hi</main></html>", encoding="utf-8")
    monkeypatch.setattr(StubAuditor, "report", AuditReport(target="<inline html>"))

    result = runner.invoke(app, ["scan", str(page), "--html", "--no-keyboard"])

    assert result.exit_code == 0
    target, request = StubAuditor.calls[0]
    assert target.html.startswith("<html lang='en'>")
    assert request.keyboard is False


def test_scan_missing_html_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["scan", str(tmp_path / "nope.html"), "--html"])
    assert result.exit_code == 2


def test_scan_engine_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(StubAuditor, "error", ScannerError("axe is not defined", "axe"))

    result = runner.invoke(app, ["scan", "https://example.test/"])

    assert result.exit_code == 2


def test_bad_config_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("A11YCHECK_CONFIG_FILE", str(tmp_path / "missing.yaml"))

    result = runner.invoke(app, ["scan", "https://example.test/"])

    assert result.exit_code == 2
    assert StubAuditor.calls == []


def test_keyboard_reports_issues(
    monkeypatch: pytest.MonkeyPatch, trapped_keyboard_result: KeyboardTestResult
) -> None:
    monkeypatch.setattr(StubAuditor, "keyboard", trapped_keyboard_result)

    result = runner.invoke(app, ["keyboard", "https://example.test/", "-f", "markdown"])

    assert result.exit_code == 1
    assert "# Keyboard Accessibility Test Results" in result.output


def test_keyboard_clean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(StubAuditor, "keyboard", KeyboardTestResult())

    result = runner.invoke(app, ["keyboard", "https://example.test/", "-f", "json"])

    assert result.exit_code == 0
    assert json.loads(result.output)["violations"] == []
