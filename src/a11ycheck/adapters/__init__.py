"""
Adapters layer for a11ycheck.

Contains all infrastructure implementations: the Playwright browser,
engine script loading, and the in-page scripts.
"""

from a11ycheck.adapters.assets import ScriptAssets
from a11ycheck.adapters.browser import BrowserAdapter, PageTarget, PlaywrightPage

__all__ = [
    "BrowserAdapter",
    "PageTarget",
    "PlaywrightPage",
    "ScriptAssets",
]
