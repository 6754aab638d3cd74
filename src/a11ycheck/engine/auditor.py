"""
Auditor: runs one accessibility audit end to end.

Opens a page for the target, runs the selected engines against it, runs
the keyboard walk when requested, and aggregates everything into an
``AuditReport``. The page is closed on every exit path.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, AsyncContextManager, Protocol

from pydantic import BaseModel, ConfigDict, Field

from a11ycheck.adapters.assets import ScriptAssets
from a11ycheck.adapters.browser import BrowserAdapter, PageTarget
from a11ycheck.domain.config import AuditConfig, Engine, WcagLevel
from a11ycheck.domain.keyboard import KeyboardTestResult
from a11ycheck.domain.models import RuleInfo
from a11ycheck.domain.report import AuditReport, EngineReport
from a11ycheck.engine.tab_walk import TabWalker
from a11ycheck.scanners.axe import AxeScanner
from a11ycheck.scanners.base import ScanOptions
from a11ycheck.scanners.ibm import IbmScanner

if TYPE_CHECKING:
    from a11ycheck.scanners.base import Scanner

logger = logging.getLogger(__name__)

BLANK_PAGE = "<!DOCTYPE html><html lang='en'><head><title>rules</title></head><body></body></html>"


class PageOpener(Protocol):
    """Anything that can open a scoped page for a target."""

    def open(self, target: PageTarget) -> AsyncContextManager[Any]:
        ...


class AuditRequest(BaseModel):
    """Per-call overrides of the process configuration."""

    model_config = ConfigDict(frozen=True)

    tags: list[str] | None = Field(default=None, description="Explicit axe-core tags")
    engine: str | None = None
    wcag_level: str | None = None
    keyboard: bool | None = None


class Auditor:
    """
    Runs accessibility engines and the keyboard walk against pages.

    One Auditor serves many calls; each call owns its own browser page.
    """

    def __init__(
        self,
        config: AuditConfig | None = None,
        browser: PageOpener | None = None,
        assets: ScriptAssets | None = None,
        scanners: dict[str, Scanner] | None = None,
    ) -> None:
        """
        Initialize the auditor.

        Args:
            config: Process configuration.
            browser: Page opener. Defaults to a Playwright BrowserAdapter.
            assets: Engine script loader shared by the scanners.
            scanners: Engines by id. Defaults to axe-core and IBM Equal Access.
        """
        self.config = config or AuditConfig()
        self.browser = browser or BrowserAdapter(
            self.config.browser, snippet_limit=self.config.keyboard.html_snippet_limit
        )
        self.assets = assets or ScriptAssets()
        self.axe = AxeScanner(self.assets, self.config.axe_source)
        self.scanners: dict[str, Scanner] = scanners if scanners is not None else {
            AxeScanner.engine_id: self.axe,
            IbmScanner.engine_id: IbmScanner(self.assets, self.config.ace_source),
        }

    def resolve_engine(self, requested: str | None) -> Engine:
        """Requested engine, or the configured one when missing or unknown."""
        if requested is None:
            return self.config.engine
        engine = Engine.parse(requested)
        if engine is None:
            logger.warning("Unknown engine %r, using %s", requested, self.config.engine.value)
            return self.config.engine
        return engine

    def resolve_level(self, requested: str | None) -> WcagLevel:
        """Requested WCAG level, or the configured one when missing or unknown."""
        if requested is None:
            return self.config.wcag_level
        level = WcagLevel.parse(requested)
        if level is None:
            logger.warning("Unknown WCAG level %r, using %s", requested,
                           self.config.wcag_level.value)
            return self.config.wcag_level
        return level

    def scan_options(self, request: AuditRequest) -> ScanOptions:
        level = self.resolve_level(request.wcag_level)
        return ScanOptions(
            tags=list(request.tags) if request.tags else self.config.axe_tags(level),
            ibm_policy=level.ibm_policy,
            include_recommendations=self.config.best_practices,
        )

    async def audit(self, target: PageTarget, request: AuditRequest | None = None) -> AuditReport:
        """
        Audit one page.

        Args:
            target: URL or inline HTML to load.
            request: Per-call overrides.

        Returns:
            AuditReport with every engine's output and, when enabled, the
            keyboard test result.

        Raises:
            NavigationError: If the page does not load.
            ScannerError: If an engine fails.
        """
        request = request or AuditRequest()
        engine = self.resolve_engine(request.engine)
        level = self.resolve_level(request.wcag_level)
        options = self.scan_options(request)
        run_keyboard = (
            request.keyboard if request.keyboard is not None else self.config.keyboard_testing
        )

        start_time = time.perf_counter()
        reports: list[EngineReport] = []
        keyboard: KeyboardTestResult | None = None

        async with self.browser.open(target) as page:
            for engine_id in engine.engine_ids:
                logger.info("Running %s on %s", engine_id, target.label)
                reports.append(await self.scanners[engine_id].run(page, options))

            # Last: the walk moves focus and may reload the page
            if run_keyboard:
                keyboard = await TabWalker(tuning=self.config.keyboard).run(page)

        duration_ms = (time.perf_counter() - start_time) * 1000

        return AuditReport(
            target=target.label,
            duration_ms=duration_ms,
            wcag_level=level.label,
            tags=options.tags,
            engines=reports,
            keyboard=keyboard,
            metadata={
                "engine": engine.value,
                "keyboard_testing": run_keyboard,
            },
        )

    async def keyboard_test(self, target: PageTarget) -> KeyboardTestResult:
        """Run only the keyboard walk against a page."""
        async with self.browser.open(target) as page:
            return await TabWalker(tuning=self.config.keyboard).run(page)

    async def rules(self, tags: list[str] | None = None) -> list[RuleInfo]:
        """List axe-core rules, optionally filtered by tags."""
        async with self.browser.open(PageTarget(html=BLANK_PAGE)) as page:
            return await self.axe.rules(page, tags)


async def audit_page(
    url: str | None = None,
    html: str | None = None,
    config: AuditConfig | None = None,
    **overrides: Any,
) -> AuditReport:
    """
    Audit a URL or an HTML string.

    This is the primary public API for one-off audits.

    Args:
        url: Page to load.
        html: Inline HTML to load instead of a URL.
        config: Process configuration. Defaults to ``AuditConfig.load()``.
        **overrides: AuditRequest fields (tags, engine, wcag_level, keyboard).

    Returns:
        AuditReport for the page.

    Example:
        >>> report = await audit_page("https://example.com", engine="both")
        >>> print(report.summary.total)
    """
    auditor = Auditor(config or AuditConfig.load())
    return await auditor.audit(PageTarget(url=url, html=html), AuditRequest(**overrides))
