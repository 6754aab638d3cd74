"""
The page contract the keyboard engine drives.

Implementations read the live DOM and return typed ``ElementProbe``
models; the engine never sees raw script results.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from a11ycheck.domain.keyboard import AriaState, ElementProbe


class KeyboardPage(Protocol):
    """
    A live page that accepts key input and answers DOM questions.

    Methods that touch the page raise ``NavigationError`` when the page
    breaks underneath them, e.g. when its execution context is destroyed.
    """

    async def current_url(self) -> str:
        """URL of the main frame."""
        ...

    async def press(self, key: str) -> None:
        """Send one key press (e.g. "Tab", "Enter", "Escape")."""
        ...

    async def pause(self, ms: int) -> None:
        """Let the page settle after synthetic input."""
        ...

    async def focus_document_start(self) -> None:
        """Blur the active element and focus the document body."""
        ...

    async def install_navigation_guard(self) -> None:
        """Abort main-frame navigations not already in flight."""
        ...

    def navigation_allowed(self) -> AbstractAsyncContextManager[None]:
        """Suspend the navigation guard for the duration of the block."""
        ...

    async def restore(self, url: str) -> None:
        """Reload the page's original content after an unwanted navigation."""
        ...

    async def focus_candidates(self) -> list[ElementProbe]:
        """Elements matching the focusable-element query, in document order."""
        ...

    async def interactive_candidates(self) -> list[ElementProbe]:
        """Elements carrying event handler attributes or interactive roles."""
        ...

    async def active_element(self) -> ElementProbe | None:
        """The focused element, or None when focus is on the body or root."""
        ...

    async def active_ancestry(self) -> list[ElementProbe]:
        """The focused element followed by its ancestors, stopping below body."""
        ...

    async def aria_state(self, selector: str) -> AriaState | None:
        """ARIA state of the first element matching ``selector``."""
        ...
