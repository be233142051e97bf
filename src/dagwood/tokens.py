"""Connector tokens used to draw dependency trees."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TreeTokens:
    """The four connector strings used when serializing a dependency tree.

    Attributes:
        node_indent: Connector for a node that has siblings after it.
        last_node_indent: Connector for the last node among its siblings.
        fill_indent: Filler under an ancestor that has siblings after it.
        last_fill_indent: Filler under an ancestor that was last of its siblings.
    """

    node_indent: str
    last_node_indent: str
    fill_indent: str
    last_fill_indent: str

    def node(self, last: bool) -> str:
        return self.last_node_indent if last else self.node_indent

    def fill(self, last: bool) -> str:
        return self.last_fill_indent if last else self.fill_indent


WHITESPACE_TOKENS = TreeTokens("   ", "   ", "   ", "   ")

STANDARD_TOKENS = TreeTokens("+- ", "\\- ", "|  ", "   ")

EXTENDED_TOKENS = TreeTokens("├─ ", "└─ ", "│  ", "   ")


class TokenStyle(str, Enum):
    """Named token tables selectable from configuration and the CLI."""

    whitespace = "whitespace"
    standard = "standard"
    extended = "extended"

    @property
    def tokens(self) -> TreeTokens:
        return _TOKENS_BY_STYLE[self]


_TOKENS_BY_STYLE: dict[TokenStyle, TreeTokens] = {
    TokenStyle.whitespace: WHITESPACE_TOKENS,
    TokenStyle.standard: STANDARD_TOKENS,
    TokenStyle.extended: EXTENDED_TOKENS,
}


def tokens_for(style: str | TokenStyle) -> TreeTokens:
    """Look up a predefined token table by name.

    Raises:
        ValueError: If `style` does not name a predefined table.
    """
    if isinstance(style, TokenStyle):
        return style.tokens
    try:
        return TokenStyle(style.strip().lower()).tokens
    except ValueError:
        choices = ", ".join(s.value for s in TokenStyle)
        raise ValueError(f"Unknown token style: {style!r} (choose from {choices})") from None
