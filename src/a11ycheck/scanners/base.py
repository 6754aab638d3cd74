"""
Base scanner infrastructure.

Defines the Scanner protocol and base class for accessibility engines.
A scanner injects its engine into a loaded page, runs it, and normalizes
the engine's output into an ``EngineReport``.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from a11ycheck.domain.exceptions import AssetError, ScannerError

if TYPE_CHECKING:
    from a11ycheck.adapters.assets import ScriptAssets
    from a11ycheck.domain.report import EngineReport


class ScriptPage(Protocol):
    """A loaded page that accepts injected scripts."""

    async def add_script(self, content: str) -> None:
        ...

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        ...


class ScanOptions(BaseModel):
    """Per-run engine options."""

    model_config = ConfigDict(frozen=True)

    tags: list[str] = Field(default_factory=list, description="axe-core tags to run")
    ibm_policy: str = Field(default="WCAG_2_1", description="IBM Equal Access ruleset id")
    include_recommendations: bool = Field(
        default=False, description="Report IBM recommendations as minor violations"
    )


@runtime_checkable
class Scanner(Protocol):
    """
    Protocol for accessibility engines.

    Engine failures propagate as ScannerError; a scanner never swallows
    them into an empty report.
    """

    @property
    def engine_id(self) -> str:
        """Short engine identifier, e.g. axe."""
        ...

    async def run(self, page: ScriptPage, options: ScanOptions) -> EngineReport:
        """
        Run the engine against a loaded page.

        Args:
            page: The page to scan.
            options: Tags and policies to run with.

        Returns:
            The engine's normalized report.
        """
        ...


class BaseScanner:
    """
    Base class for engines loaded from a script bundle.

    Subclasses define ``engine_id`` and implement ``_run``.
    """

    engine_id: str = ""
    name: str = ""

    def __init__(self, assets: ScriptAssets, source: str) -> None:
        """
        Args:
            assets: Loader used to fetch the engine bundle.
            source: URL or path of the engine bundle.
        """
        self.assets = assets
        self.source = source

    async def inject(self, page: ScriptPage) -> None:
        """Inject the engine bundle into the page."""
        script = await self.assets.load(self.source)
        await page.add_script(script)

    async def run(self, page: ScriptPage, options: ScanOptions) -> EngineReport:
        try:
            await self.inject(page)
            return await self._run(page, options)
        except (ScannerError, AssetError):
            raise
        except Exception as e:
            raise ScannerError(f"{self.name or self.engine_id} failed: {e}", self.engine_id) from e

    @abstractmethod
    async def _run(self, page: ScriptPage, options: ScanOptions) -> EngineReport:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.engine_id}>"
