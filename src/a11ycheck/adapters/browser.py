"""
Browser adapter for a11ycheck.

Drives Chromium through the Playwright async API. Each audit gets its own
browser, context and page, closed on every exit path.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import anyio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Route, async_playwright
from pydantic import BaseModel, ConfigDict, model_validator

from a11ycheck.adapters import dom_scripts
from a11ycheck.domain.config import BrowserSettings
from a11ycheck.domain.exceptions import NavigationError
from a11ycheck.domain.keyboard import AriaState, ElementProbe

logger = logging.getLogger(__name__)


class PageTarget(BaseModel):
    """What to load: a URL or inline HTML, never both."""

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    html: str | None = None

    @model_validator(mode="after")
    def exactly_one(self) -> PageTarget:
        if bool(self.url) == bool(self.html):
            raise ValueError("Provide exactly one of url or html")
        return self

    @property
    def label(self) -> str:
        return self.url or "<inline html>"


class PlaywrightPage:
    """
    A loaded Playwright page.

    Implements the keyboard engine's ``KeyboardPage`` contract and the
    scanners' script-injection contract. Raw evaluation results are
    validated into domain models here and nowhere else.
    """

    def __init__(
        self,
        page: Page,
        target: PageTarget,
        settings: BrowserSettings,
        snippet_limit: int = 200,
    ) -> None:
        self._page = page
        self.target = target
        self.settings = settings
        self.snippet_limit = snippet_limit
        self._guard_installed = False
        self._guard_armed = False

    async def load(self) -> None:
        """
        Load the target into the page.

        Raises:
            NavigationError: If the page does not load within the budget.
        """
        try:
            if self.target.url:
                logger.info("Loading %s", self.target.url)
                await self._page.goto(
                    self.target.url,
                    wait_until=self.settings.wait_until,
                    timeout=self.settings.navigation_timeout_ms,
                )
                # Dynamic content
                await self.pause(self.settings.load_settle_ms)
            else:
                await self._page.set_content(
                    self.target.html or "",
                    wait_until="load",
                    timeout=self.settings.navigation_timeout_ms,
                )
        except PlaywrightError as e:
            raise NavigationError(
                f"Failed to load {self.target.label}: {e.message}", url=self.target.url
            ) from e

    # --- script injection ---

    async def add_script(self, content: str) -> None:
        await self._page.add_script_tag(content=content)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        return await self._page.evaluate(expression, arg)

    # --- KeyboardPage ---

    @asynccontextmanager
    async def _page_errors(self, action: str) -> AsyncIterator[None]:
        """Surface Playwright failures (closed page, destroyed context) as NavigationError."""
        try:
            yield
        except PlaywrightError as e:
            raise NavigationError(
                f"Page error while {action}: {e.message}", url=self._page.url
            ) from e

    async def current_url(self) -> str:
        return self._page.url

    async def press(self, key: str) -> None:
        async with self._page_errors(f"pressing {key}"):
            await self._page.keyboard.press(key)

    async def pause(self, ms: int) -> None:
        if ms > 0:
            await anyio.sleep(ms / 1000)

    async def focus_document_start(self) -> None:
        async with self._page_errors("resetting focus"):
            await self._page.evaluate(dom_scripts.FOCUS_DOCUMENT_START)

    async def install_navigation_guard(self) -> None:
        if not self._guard_installed:
            async with self._page_errors("installing the navigation guard"):
                await self._page.route("**/*", self._guard_route)
            self._guard_installed = True
        self._guard_armed = True

    async def _guard_route(self, route: Route) -> None:
        request = route.request
        if (
            self._guard_armed
            and request.is_navigation_request()
            and request.frame == self._page.main_frame
            and request.redirected_from is None
        ):
            logger.debug("Blocked navigation to %s", request.url)
            await route.abort()
            return
        await route.continue_()

    @asynccontextmanager
    async def navigation_allowed(self) -> AsyncIterator[None]:
        armed = self._guard_armed
        self._guard_armed = False
        try:
            yield
        finally:
            self._guard_armed = armed

    async def restore(self, url: str) -> None:
        async with self.navigation_allowed():
            try:
                if self.target.html is not None:
                    await self._page.set_content(
                        self.target.html,
                        wait_until="load",
                        timeout=self.settings.navigation_timeout_ms,
                    )
                else:
                    await self._page.goto(
                        url,
                        wait_until=self.settings.wait_until,
                        timeout=self.settings.navigation_timeout_ms,
                    )
            except PlaywrightError as e:
                raise NavigationError(f"Failed to restore {url}: {e.message}", url=url) from e

    async def focus_candidates(self) -> list[ElementProbe]:
        return await self._query(dom_scripts.FOCUSABLE_QUERY)

    async def interactive_candidates(self) -> list[ElementProbe]:
        return await self._query(dom_scripts.INTERACTIVE_QUERY)

    async def active_element(self) -> ElementProbe | None:
        async with self._page_errors("reading the focused element"):
            raw = await self._page.evaluate(dom_scripts.ACTIVE_ELEMENT, self.snippet_limit)
        return ElementProbe.model_validate(raw) if raw else None

    async def active_ancestry(self) -> list[ElementProbe]:
        async with self._page_errors("reading the focus ancestry"):
            raw = await self._page.evaluate(dom_scripts.ACTIVE_ANCESTRY, self.snippet_limit)
        return [ElementProbe.model_validate(item) for item in raw or []]

    async def aria_state(self, selector: str) -> AriaState | None:
        try:
            raw = await self._page.evaluate(dom_scripts.ARIA_STATE, selector)
        except PlaywrightError:
            # Derived selectors are not always valid CSS (e.g. ids with colons)
            logger.debug("Could not query ARIA state for %s", selector)
            return None
        return AriaState.model_validate(raw) if raw else None

    async def _query(self, query: str) -> list[ElementProbe]:
        async with self._page_errors("querying elements"):
            raw = await self._page.evaluate(dom_scripts.QUERY_ELEMENTS, [query, self.snippet_limit])
        return [ElementProbe.model_validate(item) for item in raw or []]


class BrowserAdapter:
    """
    Opens scoped browser pages.

    A fresh Chromium instance is launched per ``open`` so concurrent audits
    never share a browser, context or page.
    """

    def __init__(self, settings: BrowserSettings | None = None, snippet_limit: int = 200) -> None:
        """
        Initialize the browser adapter.

        Args:
            settings: Launch and load settings.
            snippet_limit: Maximum outerHTML length kept per element.
        """
        self.settings = settings or BrowserSettings()
        self.snippet_limit = snippet_limit

    @asynccontextmanager
    async def open(self, target: PageTarget) -> AsyncIterator[PlaywrightPage]:
        """
        Launch a browser, load ``target`` and yield the page.

        The browser is closed when the block exits, including on errors.

        Raises:
            NavigationError: If the target does not load.
        """
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=self.settings.headless)
            try:
                context = await browser.new_context(bypass_csp=self.settings.bypass_csp)
                page = await context.new_page()
                wrapped = PlaywrightPage(page, target, self.settings, self.snippet_limit)
                await wrapped.load()
                yield wrapped
            finally:
                await browser.close()
