"""Rendering configuration.

Configuration is read from environment variables; CLI options override it.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dagwood.formatter import DEFAULT_FALLBACK, DefaultNodeFormatter, VerboseNodeFormatter
from dagwood.renderer import TreeRenderer
from dagwood.tokens import TokenStyle, TreeTokens, tokens_for


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass
class RenderConfig:
    """Render configuration container.

    Attributes:
        token_style: Name of the predefined token table.
        fallback: Label for a node without a dependency.
        show_optional: Mark optional dependencies in labels.
        log_level: Logging level name for the CLI.
    """

    token_style: str = TokenStyle.standard.value
    fallback: str = DEFAULT_FALLBACK
    show_optional: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "RenderConfig":
        """Create configuration from environment variables.

        Environment variables:
            DAGWOOD_TOKENS: "standard", "whitespace" or "extended" (default: "standard")
            DAGWOOD_FALLBACK: Label for an artifact-less root (default: "null")
            DAGWOOD_SHOW_OPTIONAL: "1"/"true" to mark optional dependencies
            DAGWOOD_LOG_LEVEL: Logging level name (default: "WARNING")
        """
        return cls(
            token_style=os.getenv("DAGWOOD_TOKENS", TokenStyle.standard.value).strip().lower(),
            fallback=os.getenv("DAGWOOD_FALLBACK", DEFAULT_FALLBACK),
            show_optional=os.getenv("DAGWOOD_SHOW_OPTIONAL", "").strip().lower() in ("1", "true", "yes"),
            log_level=os.getenv("DAGWOOD_LOG_LEVEL", "WARNING").strip().upper(),
        )

    def validate(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If the token style or log level is unknown.
        """
        tokens_for(self.token_style)
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {self.log_level}")

    @property
    def tokens(self) -> TreeTokens:
        return tokens_for(self.token_style)

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    def create_renderer(self) -> TreeRenderer:
        """Build a renderer from this configuration."""
        self.validate()
        formatter_cls = VerboseNodeFormatter if self.show_optional else DefaultNodeFormatter
        return TreeRenderer(self.tokens, formatter_cls(self.fallback))
