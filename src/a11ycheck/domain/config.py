"""
Configuration models for a11ycheck.

Configuration is read once at startup (defaults, then an optional YAML
file, then environment variables) into an ``AuditConfig`` which is passed
explicitly to every component that needs it.

A malformed engine or WCAG level selection is never fatal: it is logged and
replaced by the documented default.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from a11ycheck.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "A11YCHECK_"

# Tags axe-core actually defines for WCAG conformance levels
AXE_WCAG_TAGS = frozenset({"wcag2a", "wcag2aa", "wcag2aaa", "wcag21a", "wcag21aa", "wcag22aa"})

_VERSIONS = ["2", "21", "22"]
_LEVELS = ["a", "aa", "aaa"]
_IBM_POLICIES = {"2": "WCAG_2_0", "21": "WCAG_2_1", "22": "WCAG_2_2"}


class Engine(str, Enum):
    """Which accessibility engine(s) to run."""

    AXE = "axe"
    IBM = "ibm"
    BOTH = "both"

    @property
    def engine_ids(self) -> list[str]:
        if self is Engine.BOTH:
            return [Engine.AXE.value, Engine.IBM.value]
        return [self.value]

    @classmethod
    def parse(cls, value: Any) -> Engine | None:
        """Parse an engine name, returning None when it is not recognized."""
        if isinstance(value, Engine):
            return value
        text = str(value or "").strip().lower()
        aliases = {"axe-core": "axe", "equal-access": "ibm", "ace": "ibm", "all": "both"}
        text = aliases.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return None


class WcagLevel(str, Enum):
    """A WCAG conformance tier: version x A/AA/AAA."""

    WCAG2A = "wcag2a"
    WCAG2AA = "wcag2aa"
    WCAG2AAA = "wcag2aaa"
    WCAG21A = "wcag21a"
    WCAG21AA = "wcag21aa"
    WCAG21AAA = "wcag21aaa"
    WCAG22A = "wcag22a"
    WCAG22AA = "wcag22aa"
    WCAG22AAA = "wcag22aaa"

    @property
    def version(self) -> str:
        return re.match(r"wcag(\d+)", self.value).group(1)  # type: ignore[union-attr]

    @property
    def level(self) -> str:
        return self.value[len("wcag") + len(self.version):]

    @property
    def label(self) -> str:
        """Human form, e.g. 'WCAG 2.1 AA'."""
        version = "2.0" if self.version == "2" else f"{self.version[0]}.{self.version[1]}"
        return f"WCAG {version} {self.level.upper()}"

    @property
    def axe_tags(self) -> list[str]:
        """
        Cumulative axe-core tags for this tier.

        WCAG 2.1 AA includes every 2.0 and 2.1 tag at A and AA.
        """
        versions = _VERSIONS[: _VERSIONS.index(self.version) + 1]
        levels = _LEVELS[: _LEVELS.index(self.level) + 1]
        tags = [f"wcag{v}{lvl}" for v in versions for lvl in levels]
        return [tag for tag in tags if tag in AXE_WCAG_TAGS]

    @property
    def ibm_policy(self) -> str:
        """IBM Equal Access ruleset id for this WCAG version."""
        return _IBM_POLICIES[self.version]

    @classmethod
    def parse(cls, value: Any) -> WcagLevel | None:
        """
        Parse loose level spellings such as 'wcag21aa', '2.1 AA' or 'AA'.

        A bare level ('A', 'AA', 'AAA') means WCAG 2.1. Returns None when
        the value cannot be understood.
        """
        if isinstance(value, WcagLevel):
            return value
        text = re.sub(r"[\s._\-]", "", str(value or "").lower())
        if text.startswith("wcag"):
            text = text[len("wcag"):]
        match = re.fullmatch(r"(2|20|21|22)?(a{1,3})", text)
        if not match:
            return None
        version = match.group(1) or "21"
        if version == "20":
            version = "2"
        return cls(f"wcag{version}{match.group(2)}")


class KeyboardTuning(BaseModel):
    """
    Empirical constants of the keyboard walk.

    None of these values has a derivation; they are tuning knobs.
    """

    model_config = ConfigDict(frozen=True)

    repeat_threshold: int = Field(
        default=3, ge=2, description="Consecutive identical focus reads that count as a trap"
    )
    tab_settle_ms: int = Field(default=100, ge=0, description="Wait after each Tab")
    activation_settle_ms: int = Field(default=500, ge=0, description="Wait after Enter")
    escape_settle_ms: int = Field(default=300, ge=0, description="Wait after Escape")
    step_headroom: int = Field(default=10, ge=0, description="Tabs allowed beyond the census")
    max_steps: int = Field(default=150, ge=1, description="Hard ceiling on Tab presses")
    dialog_escape_budget: int = Field(
        default=5, ge=0, description="Escape attempts allowed on the trap path per run"
    )
    html_snippet_limit: int = Field(default=200, ge=20, description="outerHTML truncation")

    def step_budget(self, total_focusable: int) -> int:
        """Tab presses allowed for a page with ``total_focusable`` elements."""
        return min(total_focusable + self.step_headroom, self.max_steps)


class BrowserSettings(BaseModel):
    """How pages are opened and loaded."""

    model_config = ConfigDict(frozen=True)

    headless: bool = True
    navigation_timeout_ms: int = Field(default=90_000, ge=1000)
    load_settle_ms: int = Field(
        default=3000, ge=0, description="Wait after load for dynamic content"
    )
    wait_until: str = Field(default="domcontentloaded")
    bypass_csp: bool = Field(
        default=True, description="Allow engine script injection on CSP-protected pages"
    )


class AuditConfig(BaseModel):
    """Process-wide configuration, built once and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    engine: Engine = Engine.AXE
    wcag_level: WcagLevel = WcagLevel.WCAG21AA
    best_practices: bool = Field(default=False, description="Also run best-practice rules")
    keyboard_testing: bool = Field(default=True, description="Run the keyboard walk in audits")
    axe_source: str = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.10.2/axe.min.js"
    ace_source: str = "https://unpkg.com/accessibility-checker-engine@latest/ace.js"
    log_level: str = "INFO"
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    keyboard: KeyboardTuning = Field(default_factory=KeyboardTuning)

    @field_validator("engine", mode="before")
    @classmethod
    def fallback_engine(cls, v: Any) -> Engine:
        engine = Engine.parse(v)
        if engine is None:
            logger.warning("Unknown engine %r, falling back to %s", v, Engine.AXE.value)
            return Engine.AXE
        return engine

    @field_validator("wcag_level", mode="before")
    @classmethod
    def fallback_level(cls, v: Any) -> WcagLevel:
        level = WcagLevel.parse(v)
        if level is None:
            logger.warning(
                "Unknown WCAG level %r, falling back to %s", v, WcagLevel.WCAG21AA.value
            )
            return WcagLevel.WCAG21AA
        return level

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        level = str(v or "INFO").upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logger.warning("Unknown log level %r, falling back to INFO", v)
            return "INFO"
        return level

    def axe_tags(self, level: WcagLevel | None = None) -> list[str]:
        """Tags to run axe-core with for ``level`` (default: configured level)."""
        tags = list((level or self.wcag_level).axe_tags)
        if self.best_practices:
            tags.append("best-practice")
        return tags

    @classmethod
    def from_file(cls, path: Path | str) -> AuditConfig:
        """
        Load configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or is not a YAML mapping.
        """
        path = Path(path)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}", config_key=str(path))
        except OSError as e:
            raise ConfigError(f"Error reading config: {e}", config_key=str(path))

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config: {e}", config_key=str(path))

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", config_key=str(path))

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuditConfig:
        """Build a config from a mapping such as a parsed YAML file."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> AuditConfig:
        """
        Build the process configuration.

        Defaults, then the YAML file named by ``A11YCHECK_CONFIG_FILE``, then
        the individual ``A11YCHECK_*`` variables.
        """
        environ = os.environ if environ is None else environ

        config_file = environ.get(f"{ENV_PREFIX}CONFIG_FILE")
        base = cls.from_file(config_file) if config_file else cls()

        return base.with_env(environ)

    def with_env(self, environ: Mapping[str, str]) -> AuditConfig:
        """
        Apply ``A11YCHECK_*`` environment overrides on top of this config.

        Each variable is validated on its own; a malformed or out-of-range
        value keeps the current setting for that key only.
        """
        config: AuditConfig = self
        browser = self.browser
        keyboard = self.keyboard

        def raw(name: str) -> str | None:
            value = environ.get(f"{ENV_PREFIX}{name}")
            return value if value not in (None, "") else None

        for name, key in (("ENGINE", "engine"), ("WCAG_LEVEL", "wcag_level"),
                          ("LOG_LEVEL", "log_level"), ("AXE_SOURCE", "axe_source"),
                          ("ACE_SOURCE", "ace_source")):
            if (value := raw(name)) is not None:
                config = _override(config, key, value, name)

        for name, key in (("BEST_PRACTICES", "best_practices"),
                          ("KEYBOARD", "keyboard_testing")):
            if (value := raw(name)) is not None:
                parsed = _parse_bool(value, default=getattr(config, key), name=name)
                config = _override(config, key, parsed, name)

        if (value := raw("HEADLESS")) is not None:
            parsed = _parse_bool(value, default=browser.headless, name="HEADLESS")
            browser = _override(browser, "headless", parsed, "HEADLESS")

        for name, key in (("NAVIGATION_TIMEOUT_MS", "navigation_timeout_ms"),
                          ("LOAD_SETTLE_MS", "load_settle_ms")):
            if (value := raw(name)) is not None:
                parsed = _parse_int(value, default=getattr(browser, key), name=name)
                browser = _override(browser, key, parsed, name)

        if (value := raw("KEYBOARD_REPEAT_THRESHOLD")) is not None:
            parsed = _parse_int(
                value, default=keyboard.repeat_threshold, name="KEYBOARD_REPEAT_THRESHOLD"
            )
            keyboard = _override(keyboard, "repeat_threshold", parsed, "KEYBOARD_REPEAT_THRESHOLD")

        return config.model_copy(update={"browser": browser, "keyboard": keyboard})


_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _override(model: _ModelT, key: str, value: Any, name: str) -> _ModelT:
    """Return ``model`` with one field replaced, or unchanged if the value is rejected."""
    try:
        return type(model).model_validate({**model.model_dump(), key: value})
    except ValidationError:
        logger.warning("Invalid value %s%s=%r, keeping %r",
                       ENV_PREFIX, name, value, getattr(model, key))
        return model


def _parse_bool(value: str, default: bool, name: str) -> bool:
    text = value.strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    logger.warning("Invalid boolean %s%s=%r, keeping %s", ENV_PREFIX, name, value, default)
    return default


def _parse_int(value: str, default: int, name: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Invalid integer %s%s=%r, keeping %d", ENV_PREFIX, name, value, default)
        return default
