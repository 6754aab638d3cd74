"""
MCP server for a11ycheck.

Exposes the audits as read-only MCP tools over stdio, plus two static
reference resources and two prompt templates.

Usage:
    server = build_server(AuditConfig.load())
    server.run(transport="stdio")
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from a11ycheck.adapters.browser import PageTarget
from a11ycheck.domain.config import AuditConfig
from a11ycheck.engine.auditor import Auditor, AuditRequest
from a11ycheck.renderers.json_renderer import JsonRenderer
from a11ycheck.renderers.markdown import MarkdownRenderer

logger = logging.getLogger(__name__)

SERVER_NAME = "a11ycheck"

INSTRUCTIONS = (
    "Web accessibility auditing. Use analyze_url or analyze_html for a Markdown "
    "report from axe-core and/or IBM Equal Access with keyboard navigation "
    "checks, analyze_url_json for machine-readable violation records, "
    "analyze_keyboard for the keyboard walk alone, and get_rules to list "
    "axe-core rules."
)

WCAG_GUIDELINES = """# WCAG Guidelines Reference

## WCAG Levels

- **Level A**: The most basic web accessibility features
- **Level AA**: Deals with the biggest and most common barriers for disabled users (most commonly targeted)
- **Level AAA**: The highest and most complex level of web accessibility

## Common WCAG Tags in axe-core

- **wcag2a**: WCAG 2.0 Level A
- **wcag2aa**: WCAG 2.0 Level AA
- **wcag21a**: WCAG 2.1 Level A
- **wcag21aa**: WCAG 2.1 Level AA
- **wcag22aa**: WCAG 2.2 Level AA
- **best-practice**: Best practices beyond WCAG requirements

## IBM Equal Access policies

- **WCAG_2_0**, **WCAG_2_1**, **WCAG_2_2**: selected from the requested WCAG version

## Four Principles of WCAG (POUR)

1. **Perceivable**: Information and UI components must be presentable to users in ways they can perceive
2. **Operable**: UI components and navigation must be operable
3. **Understandable**: Information and operation of UI must be understandable
4. **Robust**: Content must be robust enough to be interpreted by a wide variety of user agents, including assistive technologies
"""

COMMON_ISSUES = """# Common Accessibility Issues

## Most Frequent Violations

1. **Missing alternative text for images**
   - Images must have alt text for screen readers
   - Use empty alt="" for decorative images

2. **Insufficient color contrast**
   - Text must have sufficient contrast with background
   - Minimum ratio: 4.5:1 for normal text, 3:1 for large text

3. **Missing form labels**
   - All form inputs must have associated labels
   - Use <label> elements or aria-label

4. **Missing document language**
   - HTML must have lang attribute
   - Helps screen readers pronounce content correctly

5. **Keyboard accessibility**
   - All interactive elements must be keyboard accessible
   - Logical tab order and visible focus indicators
   - Focus must never be trapped; dialogs must close with Escape

6. **Missing ARIA attributes**
   - Use ARIA when HTML5 semantics aren't sufficient
   - Ensure ARIA is used correctly (roles, states, properties)

7. **Heading structure**
   - Headings should be in logical order (h1, h2, h3...)
   - Don't skip heading levels

8. **Link text**
   - Link text should be descriptive
   - Avoid "click here" or "read more"
"""


def accessibility_review_prompt(wcag_level: str = "AA") -> str:
    level = wcag_level or "AA"
    return (
        f"I need to perform a WCAG {level} accessibility review. Please analyze the "
        "accessibility of my webpage and provide:\n\n"
        "1. A summary of violations found\n"
        "2. Priority ranking based on impact\n"
        "3. Specific remediation steps for each issue\n"
        "4. Code examples where applicable\n\n"
        f"Focus on {level} compliance and highlight any critical issues that could "
        "prevent users with disabilities from accessing the content."
    )


def fix_suggestion_prompt(issue_type: str) -> str:
    if not issue_type:
        raise ValueError("issue_type is required")
    return (
        f'I have an accessibility issue: "{issue_type}". Please provide:\n\n'
        "1. Why this is an accessibility problem\n"
        "2. Which WCAG guidelines it violates\n"
        "3. Step-by-step remediation instructions\n"
        "4. Code examples showing the correct implementation\n"
        "5. How to test that the fix works\n\n"
        "Make the explanation clear and actionable."
    )


class AccessibilityTools:
    """
    The tool implementations behind the MCP surface.

    Kept separate from FastMCP registration so they can be called directly.
    Errors propagate; FastMCP turns them into rejected tool calls.
    """

    def __init__(
        self,
        auditor: Auditor,
        markdown: MarkdownRenderer | None = None,
        json_renderer: JsonRenderer | None = None,
    ) -> None:
        self.auditor = auditor
        self.markdown = markdown or MarkdownRenderer()
        self.json_renderer = json_renderer or JsonRenderer()

    async def analyze_url(
        self,
        url: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        if not url:
            raise ValueError("url is required")
        report = await self.auditor.audit(
            PageTarget(url=url), _request(tags, engine, wcag_level, keyboard)
        )
        return self.markdown.render(report)

    async def analyze_html(
        self,
        html: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        if not html:
            raise ValueError("html is required")
        report = await self.auditor.audit(
            PageTarget(html=html), _request(tags, engine, wcag_level, keyboard)
        )
        return self.markdown.render(report)

    async def analyze_url_json(
        self,
        url: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        if not url:
            raise ValueError("url is required")
        report = await self.auditor.audit(
            PageTarget(url=url), _request(tags, engine, wcag_level, keyboard)
        )
        return self.json_renderer.render(report)

    async def analyze_keyboard(self, url: str | None = None, html: str | None = None) -> str:
        target = PageTarget(url=url, html=html)
        result = await self.auditor.keyboard_test(target)
        return self.markdown.render_keyboard(result, target.label)

    async def get_rules(self, tags: list[str] | None = None) -> str:
        rules = await self.auditor.rules(tags)
        return self.markdown.render_rules(rules, tags)


def _request(
    tags: list[str] | None,
    engine: str | None,
    wcag_level: str | None,
    keyboard: bool | None,
) -> AuditRequest:
    return AuditRequest(tags=tags or None, engine=engine, wcag_level=wcag_level, keyboard=keyboard)


def build_server(
    config: AuditConfig | None = None,
    tools: AccessibilityTools | None = None,
) -> FastMCP:
    """
    Build the MCP server.

    Args:
        config: Process configuration. Defaults to ``AuditConfig.load()``.
        tools: Tool implementations, for injecting a custom auditor.

    Returns:
        A FastMCP server ready for ``run(transport="stdio")``.
    """
    config = config or AuditConfig.load()
    tools = tools or AccessibilityTools(Auditor(config))

    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS)
    read_only = ToolAnnotations(readOnlyHint=True, openWorldHint=True)

    @mcp.tool(annotations=read_only)
    async def analyze_url(
        url: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        """Run accessibility tests on a URL and return a Markdown violation report.

        Args:
            url: The URL to test (must include http:// or https://).
            tags: Optional axe-core tags to filter rules, e.g. ['wcag2a', 'wcag21aa', 'best-practice'].
            engine: 'axe', 'ibm' or 'both'. Defaults to the server configuration.
            wcag_level: Target level such as 'wcag21aa' or 'AA'. Ignored when tags are given.
            keyboard: Also run the keyboard navigation test.
        """
        return await tools.analyze_url(url, tags, engine, wcag_level, keyboard)

    @mcp.tool(annotations=read_only)
    async def analyze_html(
        html: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        """Run accessibility tests on raw HTML content and return a Markdown report.

        Args:
            html: The HTML content to test.
            tags: Optional axe-core tags to filter rules.
            engine: 'axe', 'ibm' or 'both'.
            wcag_level: Target level such as 'wcag21aa' or 'AA'.
            keyboard: Also run the keyboard navigation test.
        """
        return await tools.analyze_html(html, tags, engine, wcag_level, keyboard)

    @mcp.tool(annotations=read_only)
    async def analyze_url_json(
        url: str,
        tags: list[str] | None = None,
        engine: str | None = None,
        wcag_level: str | None = None,
        keyboard: bool | None = None,
    ) -> str:
        """Run accessibility tests on a URL and return the violations as a JSON array.

        Keyboard findings are appended as keyboard-trap, dialog-escape and
        unfocusable-interactive records.

        Args:
            url: The URL to test.
            tags: Optional axe-core tags to filter rules.
            engine: 'axe', 'ibm' or 'both'.
            wcag_level: Target level such as 'wcag21aa' or 'AA'.
            keyboard: Also run the keyboard navigation test.
        """
        return await tools.analyze_url_json(url, tags, engine, wcag_level, keyboard)

    @mcp.tool(annotations=read_only)
    async def analyze_keyboard(url: str | None = None, html: str | None = None) -> str:
        """Walk a page with the keyboard: Tab order, traps, dialogs and Enter activation.

        Args:
            url: The URL to test. Provide exactly one of url or html.
            html: Inline HTML to test.
        """
        return await tools.analyze_keyboard(url, html)

    @mcp.tool(annotations=read_only)
    async def get_rules(tags: list[str] | None = None) -> str:
        """Get information about the available axe-core accessibility rules.

        Args:
            tags: Optional tags to filter rules, e.g. ['wcag2a', 'wcag2aa'].
        """
        return await tools.get_rules(tags)

    @mcp.resource(
        "axe://wcag-guidelines",
        name="WCAG Guidelines Reference",
        description="Information about WCAG accessibility guidelines and levels",
        mime_type="text/plain",
    )
    def wcag_guidelines() -> str:
        return WCAG_GUIDELINES

    @mcp.resource(
        "axe://common-issues",
        name="Common Accessibility Issues",
        description="Most common accessibility issues found in web applications",
        mime_type="text/plain",
    )
    def common_issues() -> str:
        return COMMON_ISSUES

    @mcp.prompt(
        name="accessibility_review",
        description="Get guidance on performing an accessibility review",
    )
    def accessibility_review(wcag_level: str = "AA") -> str:
        return accessibility_review_prompt(wcag_level)

    @mcp.prompt(
        name="fix_suggestion",
        description="Get suggestions for fixing a specific accessibility issue",
    )
    def fix_suggestion(issue_type: str) -> str:
        return fix_suggestion_prompt(issue_type)

    logger.debug("MCP server built (engine=%s, level=%s)",
                 config.engine.value, config.wcag_level.value)
    return mcp


def main() -> None:
    """Run the MCP server over stdio."""
    from a11ycheck.logging_config import configure

    config = AuditConfig.load()
    configure(config.log_level)
    logger.info("Starting a11ycheck MCP server on stdio")
    build_server(config).run(transport="stdio")


if __name__ == "__main__":
    main()
